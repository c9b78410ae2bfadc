"""Tests for the remote logger sink and the JSON envelope helpers."""

import json
from collections.abc import Callable

import httpx
import pytest

from pzcommon.adapters.http import JsonClient, to_json_response
from pzcommon.adapters.writers.remote import HttpWriter
from pzcommon.config.services import ServiceName
from pzcommon.config.system import SystemConfig
from pzcommon.core.errors import RemoteSinkError, ServiceTimeoutError, UnknownServiceError
from pzcommon.core.models import SyslogMessage
from pzcommon.core.ports import SyslogWriterPort

Handler = Callable[[httpx.Request], httpx.Response]


def _logger_service(posted: list[dict], status: int = 200) -> Handler:
    """Fake logger service: GET is the liveness check, POST stores the body."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, text="Hi")
        posted.append(json.loads(request.content))
        body: dict = {"statusCode": status}
        if status >= 400:
            body["message"] = "nope"
        return httpx.Response(status, json=body)

    return handler


def _system(client: httpx.Client) -> SystemConfig:
    sys = SystemConfig(ServiceName.GOCOMMON, client=client)
    sys.add_service(ServiceName.LOGGER, "logger:14600")
    return sys


@pytest.mark.storage
class TestHttpWriter:
    """Tests for HttpWriter adapter."""

    def test_implements_writer_port(self, mock_client: Callable[[Handler], httpx.Client]) -> None:
        writer = HttpWriter(_system(mock_client(_logger_service([]))))

        assert isinstance(writer, SyslogWriterPort)

    def test_posts_json_form_to_syslog(
        self,
        mock_client: Callable[[Handler], httpx.Client],
        sample_message: SyslogMessage,
    ) -> None:
        posted: list[dict] = []
        paths: list[str] = []
        service = _logger_service(posted)

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(f"{request.method} {request.url.path}")
            return service(request)

        writer = HttpWriter(_system(mock_client(handler)))
        writer.write(sample_message)

        assert paths[-1] == "POST /syslog"
        assert posted == [
            {
                "facility": 1,
                "severity": 6,
                "version": 1,
                "timeStamp": "2023-01-02T03:04:05Z",
                "hostName": "H",
                "application": "A",
                "process": "123",
                "messageId": "M",
                "auditData": None,
                "metricData": None,
                "message": "hello",
            }
        ]

    def test_error_envelope_raises(
        self,
        mock_client: Callable[[Handler], httpx.Client],
        sample_message: SyslogMessage,
    ) -> None:
        writer = HttpWriter(_system(mock_client(_logger_service([], status=500))))

        with pytest.raises(RemoteSinkError, match="500") as excinfo:
            writer.write(sample_message)

        assert excinfo.value.response.status_code == 500
        assert excinfo.value.response.message == "nope"

    def test_transport_error_raises(
        self,
        mock_client: Callable[[Handler], httpx.Client],
        sample_message: SyslogMessage,
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200)
            raise httpx.ConnectError("gone", request=request)

        writer = HttpWriter(_system(mock_client(handler)))

        with pytest.raises(RemoteSinkError, match="gone"):
            writer.write(sample_message)

    def test_malformed_envelope_raises_sink_error(
        self,
        mock_client: Callable[[Handler], httpx.Client],
        sample_message: SyslogMessage,
    ) -> None:
        """A logger answering with a broken envelope is a sink failure."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200)
            return httpx.Response(200, json={"statusCode": 200, "pagination": "oops"})

        writer = HttpWriter(_system(mock_client(handler)))

        with pytest.raises(RemoteSinkError, match="pagination"):
            writer.write(sample_message)

    def test_uses_injected_client_for_posts(
        self,
        mock_client: Callable[[Handler], httpx.Client],
        healthy_client: httpx.Client,
        sample_message: SyslogMessage,
    ) -> None:
        posted: list[dict] = []
        writer = HttpWriter(_system(healthy_client), client=mock_client(_logger_service(posted)))

        writer.write(sample_message)

        assert len(posted) == 1

    @pytest.mark.usefixtures("fast_waits")
    def test_construction_waits_for_logger(self, unreachable_client: httpx.Client) -> None:
        with pytest.raises(ServiceTimeoutError, match="pz-logger"):
            HttpWriter(_system(unreachable_client))

    def test_logger_must_be_in_directory(self, healthy_client: httpx.Client) -> None:
        sys = SystemConfig(ServiceName.GOCOMMON, client=healthy_client)

        with pytest.raises(UnknownServiceError):
            HttpWriter(sys)

    def test_close_is_noop(self, mock_client: Callable[[Handler], httpx.Client]) -> None:
        writer = HttpWriter(_system(mock_client(_logger_service([]))))

        writer.close()
        writer.close()


@pytest.mark.encoding
class TestToJsonResponse:
    """Decoding of HTTP responses into envelopes."""

    def test_empty_body_keeps_status(self) -> None:
        assert to_json_response(httpx.Response(204)).status_code == 204

    def test_envelope_is_decoded(self) -> None:
        response = httpx.Response(200, json={"statusCode": 200, "data": {"a": 1}})

        assert to_json_response(response).data == {"a": 1}

    def test_bad_json_becomes_500(self) -> None:
        envelope = to_json_response(httpx.Response(200, text="<html>"))

        assert envelope.status_code == 500
        assert envelope.is_error()

    def test_mismatched_status_becomes_500(self) -> None:
        envelope = to_json_response(httpx.Response(200, json={"statusCode": 201}))

        assert envelope.status_code == 500
        assert "Unmatched status codes" in (envelope.message or "")

    def test_client_get_and_delete(self, mock_client: Callable[[Handler], httpx.Client]) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"statusCode": 200, "data": request.method})

        client = JsonClient("http://svc:1/", mock_client(handler))

        assert client.get_json("/x").data == "GET"
        assert client.delete_json("/x").data == "DELETE"
        assert client.put_json("/x", {"k": 1}).data == "PUT"

    @pytest.mark.parametrize(
        "body",
        [
            {"statusCode": 200, "pagination": "oops"},
            {"statusCode": 200, "pagination": {"perPage": None}},
            {"statusCode": 200, "inner": ["not", "an", "envelope"]},
            {"statusCode": "two hundred"},
        ],
    )
    def test_malformed_envelope_fields_become_500(self, body: dict) -> None:
        envelope = to_json_response(httpx.Response(200, json=body))

        assert envelope.status_code == 500
        assert envelope.is_error()
