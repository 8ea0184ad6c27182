"""HTTP request model and parser."""

from dataclasses import dataclass, field
from enum import Enum


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class HTTPRequestParseError(ValueError):
    """Request bytes do not form a start line this server understands."""


class RequestEncodingError(ValueError):
    """Request bytes are not valid UTF-8."""


@dataclass(frozen=True, slots=True)
class HTTPRequest:
    method: HTTPMethod
    path_segments: tuple[str, ...] = ()
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""

    @classmethod
    def from_bytes(cls, raw: bytes) -> "HTTPRequest":
        """Parse raw HTTP request bytes into a structured request object."""
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise RequestEncodingError("Request is not valid UTF-8") from exc

        lines = text.strip().split("\r\n")
        if not lines[0]:
            raise HTTPRequestParseError("Missing request line")

        start_line = lines[0].split(" ")
        method_token = start_line[0]
        target = start_line[1] if len(start_line) > 1 else ""

        try:
            method = HTTPMethod(method_token)
        except ValueError as exc:
            raise HTTPRequestParseError(f"Unsupported method: {method_token!r}") from exc

        headers: dict[str, str] = {}
        body_lines: list[str] = []
        remaining = lines[1:]
        for index, line in enumerate(remaining):
            if not line:
                body_lines = remaining[index + 1 :]
                break
            name, _sep, value = line.partition(": ")
            headers[name] = value

        return cls(
            method=method,
            path_segments=split_target(target),
            headers=headers,
            body="\r\n".join(body_lines),
        )

    def segment(self, index: int) -> str:
        if index < len(self.path_segments):
            return self.path_segments[index]
        return ""

    def header(self, name: str) -> str:
        if name in self.headers:
            return self.headers[name]
        lowered = name.lower()
        value = ""
        for header_name, header_value in self.headers.items():
            if header_name.lower() == lowered:
                value = header_value
        return value


def split_target(target: str) -> tuple[str, ...]:
    """Split a request-target into (route, argument); the argument keeps any further slashes."""
    return tuple(target.split("/", 2)[1:])
