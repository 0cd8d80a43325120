"""HTTP request builders and a client that forwards the trace id."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import urlsplit

import requests

from snowcore.ctxkit import get_trace_id
from snowcore.utils import http_build_query, join, json_encode

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"
TRACE_HEADER = "X-TRACE-ID"

_DEFAULT_TIMEOUT = 30
_GATEWAY_TIMEOUT = 504


class HttpStatusError(Exception):
    """Raised when a request fails or answers with a status other than 200."""

    def __init__(
        self,
        message: str,
        status_code: int,
        response: requests.Response | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


def _status_error(
    request: requests.PreparedRequest,
    status_code: int,
    reason: str,
    response: requests.Response | None = None,
) -> HttpStatusError:
    parts = urlsplit(request.url or "")
    message = (
        f"{request.method} {parts.netloc}{parts.path} "
        f"http_code({status_code}) err({reason})"
    )
    return HttpStatusError(message, status_code, response)


class Client:
    """Sends prepared requests with a timeout in seconds."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout

    def do(self, ctx: Any, request: requests.PreparedRequest) -> requests.Response:
        """Send ``request`` with the trace id of ``ctx``; anything but 200 raises."""
        set_trace_id_in_header(ctx, request)
        try:
            with requests.Session() as session:
                response = session.send(request, timeout=self.timeout or None)
        except requests.RequestException as exc:
            raise _status_error(request, _GATEWAY_TIMEOUT, str(exc)) from exc
        if response.status_code != 200:
            raise _status_error(request, response.status_code, "", response)
        return response


def set_trace_id_in_header(ctx: Any, request: requests.PreparedRequest) -> None:
    """Copy the trace id of ``ctx`` into the ``X-TRACE-ID`` header."""
    if ctx is None:
        return
    trace_id = get_trace_id(ctx)
    if trace_id:
        request.headers[TRACE_HEADER] = trace_id


def set_headers(request: requests.PreparedRequest, headers: Any) -> None:
    """Set headers from a mapping or from ``"Name: value"`` strings."""
    if isinstance(headers, Mapping):
        for name, value in headers.items():
            request.headers[name] = value
    elif isinstance(headers, Sequence) and not isinstance(headers, (str, bytes)):
        for name, value in string_list_to_map(headers).items():
            request.headers[name] = value


def string_list_to_map(items: Sequence[str]) -> dict[str, str]:
    """Split ``"name: value"`` strings into a mapping; items without a colon are dropped."""
    result: dict[str, str] = {}
    for item in items:
        name, sep, value = item.partition(":")
        if sep:
            result[name] = value.strip(" ")
    return result


def _prepare(method: str, url: str, body: bytes | None, args: tuple[Any, ...]) -> requests.PreparedRequest:
    request = requests.Request(method, url, data=body).prepare()
    return request


def _finish(request: requests.PreparedRequest, args: tuple[Any, ...]) -> requests.PreparedRequest:
    if args:
        set_headers(request, args[0])
    return request


def new_get_request(
    url: str, params: Mapping[str, Any] | None, *args: Any
) -> requests.PreparedRequest:
    """Build a GET request; ``args[0]`` holds optional headers."""
    if params is not None:
        op = "&" if "?" in url else "?"
        url = join(url, op, http_build_query(params))
    return _finish(_prepare("GET", url, None, args), args)


def new_form_post_request(
    url: str, params: Mapping[str, Any] | None, *args: Any
) -> requests.PreparedRequest:
    """Build a form-encoded POST request; ``args[0]`` holds optional headers."""
    body = http_build_query(params) if params is not None else ""
    request = _prepare("POST", url, body.encode("utf-8"), args)
    request.headers["Content-Type"] = CONTENT_TYPE_FORM
    return _finish(request, args)


def new_json_post_request(
    url: str, params: Mapping[str, Any] | None, *args: Any
) -> requests.PreparedRequest:
    """Build a JSON POST request; ``args[0]`` holds optional headers."""
    body = json_encode(params) if params is not None else ""
    request = _prepare("POST", url, body.encode("utf-8"), args)
    request.headers["Content-Type"] = CONTENT_TYPE_JSON
    return _finish(request, args)


def _get_options(args: tuple[Any, ...]) -> Mapping[str, Any]:
    if len(args) > 1 and isinstance(args[1], Mapping):
        return args[1]
    return {}


def _get_timeout(args: tuple[Any, ...]) -> int:
    timeout = _get_options(args).get("timeout")
    if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
        return _DEFAULT_TIMEOUT
    return timeout


def get(ctx: Any, url: str, params: Mapping[str, Any] | None, *args: Any) -> requests.Response:
    """Send a GET request; ``args`` are headers and options such as ``{"timeout": 10}``."""
    return Client(_get_timeout(args)).do(ctx, new_get_request(url, params, *args))


def post(ctx: Any, url: str, params: Mapping[str, Any] | None, *args: Any) -> requests.Response:
    """Send a form POST request."""
    return Client(_get_timeout(args)).do(ctx, new_form_post_request(url, params, *args))


def post_json(
    ctx: Any, url: str, params: Mapping[str, Any] | None, *args: Any
) -> requests.Response:
    """Send a JSON POST request."""
    return Client(_get_timeout(args)).do(ctx, new_json_post_request(url, params, *args))


def request(
    ctx: Any, method: str, url: str, params: Mapping[str, Any] | None, *args: Any
) -> requests.Response:
    """Send by method: ``POST`` is a form post, ``POST/JSON`` a JSON post, anything else GET."""
    client = Client(_get_timeout(args))
    upper = method.upper()
    if upper == "POST":
        prepared = new_form_post_request(url, params, *args)
    elif upper == "POST/JSON":
        prepared = new_json_post_request(url, params, *args)
    else:
        prepared = new_get_request(url, params, *args)
    return client.do(ctx, prepared)


def deal_response(response: requests.Response) -> bytes:
    """Return the body of ``response`` and close it."""
    try:
        return response.content
    finally:
        response.close()