"""Root, echo and user-agent route handlers."""

from request import HTTPRequest
from response import HTTPResponse, encode_body, text_response


def home(_request: HTTPRequest) -> HTTPResponse:
    return HTTPResponse(status_code=200)


def echo(request: HTTPRequest) -> HTTPResponse:
    response = text_response(request.segment(1))
    return encode_body(response, request.header("Accept-Encoding"))


def user_agent(request: HTTPRequest) -> HTTPResponse:
    return text_response(request.header("User-Agent"))
