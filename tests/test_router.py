"""Unit tests for routing and the built-in route table."""

import gzip

import pytest

from request import HTTPMethod, HTTPRequest
from response import HTTPResponse
from router import Router
from server import build_router


def _handler_ok(_request: HTTPRequest) -> HTTPResponse:
    return HTTPResponse(status_code=200, body="ok")


def _request(raw: bytes) -> HTTPRequest:
    return HTTPRequest.from_bytes(raw)


def test_router_resolves_exact_method_and_segment() -> None:
    router = Router()
    router.add_route("get", "echo", _handler_ok)

    assert router.resolve(HTTPMethod.GET, "echo") is _handler_ok
    assert router.resolve("POST", "echo") is None
    assert router.resolve("PATCH", "echo") is None


def test_router_rejects_segment_with_slash() -> None:
    router = Router()

    with pytest.raises(ValueError, match="segment cannot contain"):
        router.add_route("GET", "files/x", _handler_ok)


def test_router_rejects_unknown_method() -> None:
    router = Router()

    with pytest.raises(ValueError):
        router.add_route("PATCH", "echo", _handler_ok)


def test_dispatch_miss_returns_404() -> None:
    response = Router().dispatch(_request(b"GET /anything HTTP/1.1\r\n\r\n"))

    assert response.status_code == 404


def test_root_returns_bare_200() -> None:
    response = build_router().dispatch(_request(b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n"))

    assert response.to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"


def test_zero_segments_route_as_root() -> None:
    request = HTTPRequest(method=HTTPMethod.GET, path_segments=())

    assert build_router().dispatch(request).to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"


def test_echo_returns_argument() -> None:
    response = build_router().dispatch(_request(b"GET /echo/abc HTTP/1.1\r\n\r\n"))

    assert response.to_bytes() == (
        b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: 3\r\n\r\nabc"
    )


def test_echo_with_gzip_accept_encoding() -> None:
    raw = b"GET /echo/abc HTTP/1.1\r\nAccept-Encoding: gzip\r\n\r\n"

    response = build_router().dispatch(_request(raw))

    assert response.status_code == 200
    assert response.headers["Content-Encoding"] == "gzip"
    assert gzip.decompress(response.body) == b"abc"


def test_echo_with_unsupported_encoding_has_no_content_encoding() -> None:
    raw = b"GET /echo/abc HTTP/1.1\r\nAccept-Encoding: invalid-encoding\r\n\r\n"

    response = build_router().dispatch(_request(raw))

    assert "Content-Encoding" not in response.headers
    assert response.body == b"abc"


def test_user_agent_is_reflected() -> None:
    raw = b"GET /user-agent HTTP/1.1\r\nUser-Agent: test-agent\r\n\r\n"

    response = build_router().dispatch(_request(raw))

    assert response.status_code == 200
    assert response.headers["Content-Type"] == "text/plain"
    assert response.body == b"test-agent"


def test_missing_user_agent_yields_empty_body() -> None:
    response = build_router().dispatch(_request(b"GET /user-agent HTTP/1.1\r\n\r\n"))

    assert response.status_code == 200
    assert response.body == b""


@pytest.mark.parametrize(
    "raw",
    [
        b"GET /bogus HTTP/1.1\r\n\r\n",
        b"POST /echo/abc HTTP/1.1\r\n\r\n",
        b"POST / HTTP/1.1\r\n\r\n",
        b"PUT /files/a HTTP/1.1\r\n\r\n",
        b"DELETE /files/a HTTP/1.1\r\n\r\n",
    ],
)
def test_unmatched_routes_return_404(raw: bytes) -> None:
    assert build_router().dispatch(_request(raw)).status_code == 404


def test_files_routes_without_directory_return_404() -> None:
    router = build_router(directory=None)

    assert router.dispatch(_request(b"GET /files/a HTTP/1.1\r\n\r\n")).status_code == 404
    assert router.dispatch(_request(b"POST /files/a HTTP/1.1\r\n\r\nx")).status_code == 404


def test_repeated_get_is_byte_identical() -> None:
    router = build_router()
    raw = b"GET /echo/abc HTTP/1.1\r\nAccept-Encoding: gzip\r\n\r\n"

    first = router.dispatch(_request(raw)).to_bytes()
    second = router.dispatch(_request(raw)).to_bytes()

    assert first == second
