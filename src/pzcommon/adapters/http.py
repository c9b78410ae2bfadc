"""JSON-envelope HTTP helpers over httpx.

Every service of the family answers with a JsonResponse envelope whose
``statusCode`` repeats the HTTP status. These helpers always return an
envelope: transport and decoding failures become a 500 envelope carrying the
error text, so callers only ever test ``is_error()``.
"""

import json
from typing import Any

import httpx

from pzcommon.core.response import JsonResponse

CONTENT_TYPE_JSON = "application/json"


def error_response(error: Exception | str) -> JsonResponse:
    """Build a 500 envelope describing an error."""
    return JsonResponse(status_code=httpx.codes.INTERNAL_SERVER_ERROR, message=str(error))


def to_json_response(response: httpx.Response) -> JsonResponse:
    """Decode an HTTP response into its envelope.

    An empty body yields an envelope holding only the HTTP status.
    Undecodable bodies and envelopes whose statusCode disagrees with the
    HTTP status yield a 500 envelope.
    """
    if not response.content:
        return JsonResponse(status_code=response.status_code)

    try:
        body = json.loads(response.content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return error_response(e)
    if not isinstance(body, dict):
        return error_response("response body is not a JSON object")

    try:
        envelope = JsonResponse.from_dict(body)
    except ValueError as e:
        return error_response(e)

    if envelope.status_code != response.status_code:
        return error_response(
            f"Unmatched status codes: expected {response.status_code}, "
            f"got {envelope.status_code}"
        )
    return envelope


class JsonClient:
    """Talks JSON envelopes to one service.

    Args:
        base_url: Service URL, as returned by SystemConfig.url_of.
        client: Shared httpx client. Connection pooling is left to it.
    """

    def __init__(self, base_url: str, client: httpx.Client) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client

    def _request(self, method: str, endpoint: str, body: Any = None) -> JsonResponse:
        url = self.base_url + endpoint
        headers = {"Content-Type": CONTENT_TYPE_JSON} if body is not None else None
        try:
            content = None if body is None else json.dumps(body)
            response = self._client.request(method, url, content=content, headers=headers)
        except (httpx.HTTPError, TypeError, ValueError) as e:
            return error_response(e)
        return to_json_response(response)

    def get_json(self, endpoint: str) -> JsonResponse:
        return self._request("GET", endpoint)

    def post_json(self, endpoint: str, body: Any) -> JsonResponse:
        return self._request("POST", endpoint, body)

    def put_json(self, endpoint: str, body: Any) -> JsonResponse:
        return self._request("PUT", endpoint, body)

    def delete_json(self, endpoint: str) -> JsonResponse:
        return self._request("DELETE", endpoint)
