"""Shared test fixtures for all test modules."""

from collections.abc import Callable, Iterator
from pathlib import Path

import httpx
import pytest

from pzcommon.config import system as system_module
from pzcommon.core.models import SyslogMessage

PLATFORM_ENV_VARS = ("VCAP_APPLICATION", "VCAP_SERVICES", "PORT", "DOMAIN", "SPACE")


@pytest.fixture(autouse=True)
def clean_platform_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test without platform variables leaking in from the host."""
    for name in PLATFORM_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fast_waits(monkeypatch: pytest.MonkeyPatch) -> None:
    """Shrink the wait_for_service budgets so timeouts happen quickly."""
    monkeypatch.setattr(system_module, "WAIT_TIMEOUT_SECONDS", 0.05)
    monkeypatch.setattr(system_module, "WAIT_POLL_SECONDS", 0.01)


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    """Provide a temporary path for file sink tests."""
    return tmp_path / "t.log"


@pytest.fixture
def sample_message() -> SyslogMessage:
    """The fixed record used by the file and codec tests."""
    return SyslogMessage(
        facility=1,
        severity=6,
        timestamp="2023-01-02T03:04:05Z",
        host_name="H",
        application="A",
        process="123",
        message_id="M",
        message="hello",
    )


Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def mock_client() -> Iterator[Callable[[Handler], httpx.Client]]:
    """Factory fixture building httpx clients over a MockTransport.

    Usage:
        def test_something(mock_client):
            client = mock_client(lambda request: httpx.Response(200))
    """
    clients: list[httpx.Client] = []

    def _make(handler: Handler) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def healthy_client(mock_client: Callable[[Handler], httpx.Client]) -> httpx.Client:
    """Client for which every service answers 200."""
    return mock_client(lambda request: httpx.Response(200, text="Hi"))


@pytest.fixture
def unreachable_client(mock_client: Callable[[Handler], httpx.Client]) -> httpx.Client:
    """Client for which every connection is refused."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return mock_client(handler)
