"""Low-level socket read/write utilities."""

from __future__ import annotations

import socket
import time

from config import BUFFER_SIZE


class SocketTimeoutError(Exception):
    """Raised when a client times out while sending request bytes."""


def _extract_content_length(header_bytes: bytes) -> int:
    for line in header_bytes.split(b"\r\n")[1:]:
        name, sep, value = line.partition(b":")
        if not sep or name.strip().lower() != b"content-length":
            continue
        try:
            return max(0, int(value.strip()))
        except ValueError:
            return 0
    return 0


def request_is_complete(buffer: bytes) -> bool:
    """Return True once the head and any Content-Length body are buffered."""
    header_end_index = buffer.find(b"\r\n\r\n")
    if header_end_index == -1:
        return False
    body_start = header_end_index + 4
    expected_body_length = _extract_content_length(buffer[:header_end_index])
    return len(buffer) >= body_start + expected_body_length


def read_http_request(
    client_socket: socket.socket,
    limit: int = BUFFER_SIZE,
    timeout: float | None = None,
) -> bytes:
    """Read one request, never more than ``limit`` bytes.

    Larger requests are truncated at ``limit``; the parser sees whatever fits.
    ``timeout`` bounds the whole read, not each ``recv``.
    """
    deadline = None if timeout is None else time.monotonic() + timeout
    original_timeout = client_socket.gettimeout()
    buffer = bytearray()
    try:
        while len(buffer) < limit and not request_is_complete(bytes(buffer)):
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise SocketTimeoutError("Timed out waiting for request bytes")
                client_socket.settimeout(remaining)
            try:
                chunk = client_socket.recv(limit - len(buffer))
            except socket.timeout as exc:
                raise SocketTimeoutError("Timed out waiting for request bytes") from exc

            if not chunk:
                break
            buffer.extend(chunk)
    finally:
        client_socket.settimeout(original_timeout)
    return bytes(buffer)


def write_http_response(client_socket: socket.socket, payload: bytes) -> None:
    """Write the complete response payload to a client socket."""
    client_socket.sendall(payload)
