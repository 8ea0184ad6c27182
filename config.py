"""Configuration constants for the file/echo HTTP server."""

HOST: str = "127.0.0.1"
PORT: int = 4221
BUFFER_SIZE: int = 1024
SOCKET_TIMEOUT_SECS: float = 5
QUEUE_FULL_READ_TIMEOUT_SECS: float = 0.5
WORKER_COUNT: int = 8
REQUEST_QUEUE_SIZE: int = 64
LISTEN_BACKLOG: int = 128
LOG_FORMAT: str = "plain"
SUPPORTED_ENCODINGS: tuple[str, ...] = ("gzip",)
