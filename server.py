"""Main HTTP server entry point and connection lifecycle orchestration."""

from __future__ import annotations

import argparse
import json
import logging
import socket
import time
from collections.abc import Sequence

from config import (
    BUFFER_SIZE,
    HOST,
    LISTEN_BACKLOG,
    LOG_FORMAT,
    PORT,
    QUEUE_FULL_READ_TIMEOUT_SECS,
    REQUEST_QUEUE_SIZE,
    SOCKET_TIMEOUT_SECS,
    WORKER_COUNT,
)
from handlers.files import FileStore
from handlers.routes import echo, home, user_agent
from request import HTTPMethod, HTTPRequest, HTTPRequestParseError, RequestEncodingError
from response import HTTPResponse
from router import Router
from socket_handler import SocketTimeoutError, read_http_request, write_http_response
from thread_pool import ThreadPool

logger = logging.getLogger(__name__)


def build_router(directory: str | None = None) -> Router:
    files = FileStore(directory)
    router = Router()
    router.add_route(HTTPMethod.GET, "", home)
    router.add_route(HTTPMethod.GET, "echo", echo)
    router.add_route(HTTPMethod.GET, "user-agent", user_agent)
    router.add_route(HTTPMethod.GET, "files", files.read)
    router.add_route(HTTPMethod.POST, "files", files.create)
    return router


class HTTPServer:
    def __init__(
        self,
        host: str = HOST,
        port: int = PORT,
        router: Router | None = None,
        worker_count: int = WORKER_COUNT,
        request_queue_size: int = REQUEST_QUEUE_SIZE,
        *,
        files_directory: str | None = None,
        buffer_size: int = BUFFER_SIZE,
        socket_timeout_secs: float = SOCKET_TIMEOUT_SECS,
        log_format: str = LOG_FORMAT,
    ) -> None:
        self.host = host
        self.port = port
        self.files_directory = files_directory
        self.router = router or build_router(files_directory)
        self.worker_count = worker_count
        self.request_queue_size = request_queue_size
        self.buffer_size = buffer_size
        self.socket_timeout_secs = socket_timeout_secs
        self.log_format = log_format

        self._server_socket: socket.socket | None = None
        self._pool: ThreadPool | None = None
        self._running = False

    def start(self) -> None:
        """Bind, listen and hand every accepted connection to the worker pool."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server_socket:
            self._server_socket = server_socket
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server_socket.bind((self.host, self.port))
            server_socket.listen(LISTEN_BACKLOG)
            server_socket.settimeout(0.2)
            self.port = server_socket.getsockname()[1]
            self._pool = ThreadPool(
                worker_count=self.worker_count,
                queue_size=self.request_queue_size,
                handler=self._handle_client,
            )
            self._pool.start()
            logger.info(
                "Listening on %s:%s (files directory: %s)",
                self.host,
                self.port,
                self.files_directory or "-",
            )

            self._running = True
            try:
                while self._running:
                    try:
                        client_socket, address = server_socket.accept()
                    except socket.timeout:
                        continue
                    except OSError:
                        break

                    pool = self._pool
                    if pool is None or not pool.submit(client_socket, address):
                        self._send_queue_full_response(client_socket, address)
            finally:
                pool, self._pool = self._pool, None
                if pool is not None:
                    pool.shutdown()

    def stop(self) -> None:
        self._running = False
        server_socket, self._server_socket = self._server_socket, None
        if server_socket is not None:
            server_socket.close()
        pool, self._pool = self._pool, None
        if pool is not None:
            pool.shutdown()

    def _send_queue_full_response(
        self, client_socket: socket.socket, address: tuple[str, int]
    ) -> None:
        with client_socket:
            started_at = time.perf_counter()
            client_socket.settimeout(QUEUE_FULL_READ_TIMEOUT_SECS)
            # Consume the request first so closing does not reset the 503 away.
            try:
                try:
                    read_http_request(
                        client_socket, self.buffer_size, timeout=QUEUE_FULL_READ_TIMEOUT_SECS
                    )
                except SocketTimeoutError:
                    pass
                self._respond(
                    client_socket,
                    address,
                    HTTPResponse(status_code=503),
                    started_at=started_at,
                )
            except OSError:
                logger.warning("Could not send 503 to %s", address[0])

    def _handle_client(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        """Serve exactly one request on ``client_socket`` and close it.

        Encoding errors close the connection silently, parse errors get a
        400, a stalled client gets a 408. Filesystem errors raised by a
        handler propagate so no partial response is written.
        """
        with client_socket:
            client_socket.settimeout(self.socket_timeout_secs)
            started_at = time.perf_counter()
            try:
                raw_request = read_http_request(
                    client_socket, self.buffer_size, timeout=self.socket_timeout_secs
                )
            except SocketTimeoutError:
                self._respond(
                    client_socket,
                    address,
                    HTTPResponse(status_code=408),
                    started_at=started_at,
                )
                return

            if not raw_request:
                return

            try:
                request = HTTPRequest.from_bytes(raw_request)
            except RequestEncodingError:
                logger.warning(
                    "Closing connection from %s: request is not valid UTF-8", address[0]
                )
                return
            except HTTPRequestParseError as exc:
                logger.info("Bad request from %s: %s", address[0], exc)
                self._respond(
                    client_socket,
                    address,
                    HTTPResponse(status_code=400),
                    started_at=started_at,
                    bytes_in=len(raw_request),
                )
                return

            response = self.router.dispatch(request)
            self._respond(
                client_socket,
                address,
                response,
                started_at=started_at,
                method=request.method.value,
                path="/" + "/".join(request.path_segments),
                bytes_in=len(raw_request),
            )

    def _respond(
        self,
        client_socket: socket.socket,
        address: tuple[str, int],
        response: HTTPResponse,
        *,
        started_at: float,
        method: str = "-",
        path: str = "-",
        bytes_in: int = 0,
    ) -> None:
        payload = response.to_bytes()
        write_http_response(client_socket, payload)
        self._record_and_log(
            address=address,
            method=method,
            path=path,
            response=response,
            payload_size=len(payload),
            bytes_in=bytes_in,
            started_at=started_at,
        )

    def _record_and_log(
        self,
        *,
        address: tuple[str, int],
        method: str,
        path: str,
        response: HTTPResponse,
        payload_size: int,
        bytes_in: int,
        started_at: float,
    ) -> None:
        duration_ms = (time.perf_counter() - started_at) * 1000
        event = {
            "client": address[0],
            "method": method,
            "path": path,
            "status": response.status_code,
            "bytes_in": bytes_in,
            "bytes_out": payload_size,
            "latency_ms": round(duration_ms, 3),
        }
        if self.log_format == "json":
            logger.info(json.dumps(event, sort_keys=True))
            return

        logger.info(
            "client=%s method=%s path=%s status=%s bytes_in=%s bytes_out=%s duration_ms=%.2f",
            event["client"],
            event["method"],
            event["path"],
            event["status"],
            event["bytes_in"],
            event["bytes_out"],
            duration_ms,
        )


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the file/echo HTTP server")
    parser.add_argument(
        "-d",
        "--directory",
        default=None,
        help="directory served by /files/<name>; files routes return 404 without it",
    )
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--workers", type=int, default=WORKER_COUNT)
    parser.add_argument("--log-format", choices=["plain", "json"], default=LOG_FORMAT)
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    server = HTTPServer(
        host=args.host,
        port=args.port,
        worker_count=args.workers,
        files_directory=args.directory,
        log_format=args.log_format,
    )
    try:
        server.start()
    except KeyboardInterrupt:
        server.stop()


if __name__ == "__main__":
    main()
