"""HTTP response model and serializer."""

import gzip
from dataclasses import dataclass, field

from config import SUPPORTED_ENCODINGS

REASON_PHRASES: dict[int, str] = {
    200: "OK",
    201: "OK",
    400: "BAD REQUEST",
    404: "NOT FOUND",
    408: "REQUEST TIMEOUT",
    503: "SERVICE UNAVAILABLE",
}


@dataclass(slots=True)
class HTTPResponse:
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | str = b""

    def __post_init__(self) -> None:
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")

    @property
    def reason_phrase(self) -> str:
        return REASON_PHRASES.get(self.status_code, "UNKNOWN")

    def to_bytes(self) -> bytes:
        """Serialize the response into HTTP/1.1 wire format bytes.

        Content-Length is only emitted for a non-empty body, so an empty
        response is the status line, any headers and a blank line.
        """
        lines = [f"HTTP/1.1 {self.status_code} {self.reason_phrase}\r\n"]
        lines.extend(f"{name}: {value}\r\n" for name, value in self.headers.items())
        if self.body:
            lines.append(f"Content-Length: {len(self.body)}\r\n")
        lines.append("\r\n")
        return "".join(lines).encode("utf-8") + self.body


def not_found() -> HTTPResponse:
    return HTTPResponse(status_code=404)


def text_response(
    body: bytes | str,
    content_type: str = "text/plain",
    status_code: int = 200,
) -> HTTPResponse:
    return HTTPResponse(
        status_code=status_code,
        headers={"Content-Type": content_type},
        body=body,
    )


def negotiate_encoding(accept_encoding: str) -> str | None:
    """Pick the first client-listed coding this server can apply."""
    for token in accept_encoding.split(","):
        coding = token.split(";", 1)[0].strip().lower()
        if coding in SUPPORTED_ENCODINGS:
            return coding
    return None


def encode_body(response: HTTPResponse, accept_encoding: str) -> HTTPResponse:
    coding = negotiate_encoding(accept_encoding)
    if coding is None:
        return response

    headers = dict(response.headers)
    headers["Content-Encoding"] = coding
    return HTTPResponse(
        status_code=response.status_code,
        headers=headers,
        body=gzip.compress(response.body, mtime=0),
    )
