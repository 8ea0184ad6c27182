"""Routing table for (method, first path segment) handlers."""

from collections.abc import Callable

from request import HTTPMethod, HTTPRequest
from response import HTTPResponse, not_found

Handler = Callable[[HTTPRequest], HTTPResponse]


class Router:
    def __init__(self) -> None:
        self._routes: dict[tuple[HTTPMethod, str], Handler] = {}

    def add_route(self, method: HTTPMethod | str, segment: str, handler: Handler) -> None:
        normalized_method = _normalize_method(method)
        if "/" in segment:
            raise ValueError("segment cannot contain '/'")
        self._routes[(normalized_method, segment)] = handler

    def resolve(self, method: HTTPMethod | str, segment: str) -> Handler | None:
        try:
            normalized_method = _normalize_method(method)
        except ValueError:
            return None
        return self._routes.get((normalized_method, segment))

    def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        """Invoke the handler for the request's route; unmatched requests get a 404."""
        handler = self.resolve(request.method, request.segment(0))
        if handler is None:
            return not_found()
        return handler(request)


def _normalize_method(method: HTTPMethod | str) -> HTTPMethod:
    if isinstance(method, HTTPMethod):
        return method
    return HTTPMethod(method.upper().strip())
