"""Bounded worker pool running one job per accepted connection."""

from __future__ import annotations

import logging
import queue
import socket
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)

ClientAddress = tuple[str, int]
ConnectionJob = tuple[socket.socket, ClientAddress]
ConnectionHandler = Callable[[socket.socket, ClientAddress], None]


class ThreadPool:
    """Fixed number of worker threads fed from a bounded queue.

    A handler failure is logged and ends only that connection's job; the
    worker moves on to the next queued connection.
    """

    def __init__(self, worker_count: int, queue_size: int, handler: ConnectionHandler) -> None:
        if worker_count <= 0:
            raise ValueError("worker_count must be positive")
        if queue_size <= 0:
            raise ValueError("queue_size must be positive")

        self._handler = handler
        self._jobs: queue.Queue[ConnectionJob | None] = queue.Queue(maxsize=queue_size)
        self._stop_event = threading.Event()
        self._threads: list[threading.Thread] = []
        self._worker_count = worker_count
        self._shutdown_lock = threading.Lock()

    @property
    def worker_count(self) -> int:
        return self._worker_count

    @property
    def threads(self) -> tuple[threading.Thread, ...]:
        return tuple(self._threads)

    def start(self) -> None:
        for index in range(self._worker_count):
            worker = threading.Thread(
                target=self._worker_loop,
                name=f"connection-worker-{index}",
                daemon=True,
            )
            self._threads.append(worker)
            worker.start()

    def submit(self, client_socket: socket.socket, address: ClientAddress) -> bool:
        """Queue a connection; False when stopped or the queue is full."""
        if self._stop_event.is_set():
            return False
        try:
            self._jobs.put_nowait((client_socket, address))
        except queue.Full:
            return False
        return True

    def shutdown(self) -> None:
        with self._shutdown_lock:
            if self._stop_event.is_set():
                return
            self._stop_event.set()
        for _ in self._threads:
            self._jobs.put(None)
        for thread in self._threads:
            thread.join(timeout=1.0)

    def _worker_loop(self) -> None:
        while True:
            job = self._jobs.get()
            if job is None:
                return
            client_socket, address = job
            try:
                self._handler(client_socket, address)
            except Exception:
                logger.exception("Connection from %s:%s failed", address[0], address[1])
