"""An edge-triggered epoll echo server."""

from __future__ import annotations

import argparse
import os
import select
import sys

from .endpoint import EndPoint, ServerError
from .epoll import Epoll
from .logger import log
from .sockets import Socket

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080

_BUFFER_SIZE = 1024
_WATCH_EVENTS = select.EPOLLIN | select.EPOLLET


def _write_all(fd: int, data: bytes) -> None:
    while data:
        try:
            written = os.write(fd, data)
        except BlockingIOError:
            select.select([], [fd], [])
            continue
        data = data[written:]


def handle_read(fd: int) -> bool:
    """Echo everything readable on *fd* back to it.

    Returns True while the connection stays open, False once the peer has
    closed it or it failed.
    """
    while True:
        try:
            data = os.read(fd, _BUFFER_SIZE)
        except InterruptedError:
            log(f"[Server] client fd: {fd} continue reading")
            continue
        except BlockingIOError as exc:
            log(f"[Server] finish reading, errno: {exc.errno}")
            return True
        except OSError as exc:
            log(f"[Server] failed reading client fd: {fd}, errno: {exc.errno}")
            return False
        if not data:
            log(f"[Server] EOF, client fd: {fd} close connection")
            return False
        log(f"[Server] message from client fd: {fd} msg: {data!r}")
        try:
            _write_all(fd, data)
        except OSError as exc:
            log(f"[Server] failed writing client fd: {fd}, errno: {exc.errno}")
            return False


class Server:
    """Listens on an endpoint and echoes what every client sends."""

    def __init__(self, endpoint: EndPoint | None = None) -> None:
        self._endpoint = endpoint or EndPoint(DEFAULT_HOST, DEFAULT_PORT)
        self._clients: dict[int, Socket] = {}
        self._socket = Socket()
        self._epoll: Epoll | None = None
        try:
            self._socket.bind(self._endpoint)
            self._socket.listen()
            self._epoll = Epoll()
            self._epoll.add_fd(self._socket, 0, _WATCH_EVENTS)
        except BaseException:
            self.close()
            raise

    def _require_epoll(self) -> Epoll:
        if self._epoll is None:
            raise ServerError("[Server] server is closed")
        return self._epoll

    def _accept(self, epoll: Epoll) -> None:
        log("[Server] Find new client, connecting...")
        conn, peer = self._socket.accept()
        log(f"[Server] new client connected: {peer.host}:{peer.port}")
        os.set_blocking(conn.fileno(), False)
        epoll.add_fd(conn, 0, _WATCH_EVENTS)
        self._clients[conn.fileno()] = conn

    def _drop(self, epoll: Epoll, fd: int) -> None:
        conn = self._clients.pop(fd, None)
        try:
            epoll.del_fd(fd)
        except ServerError:
            pass
        if conn is not None:
            conn.close()

    def _on_event(self, fd: int, events: int, data: int) -> None:
        epoll = self._require_epoll()
        if fd == self._socket.fileno():
            self._accept(epoll)
        elif events & select.EPOLLIN:
            log("[Server] find read event")
            if not handle_read(fd):
                self._drop(epoll, fd)
        else:
            log("[Server] find unknown event")

    def handle_events(self, timeout: float | None = None) -> int:
        """Wait once for events, handle them, and return how many there were."""
        return self._require_epoll().wait(self._on_event, timeout)

    def start(self) -> None:
        """Serve forever."""
        while True:
            self.handle_events()

    def close(self) -> None:
        for conn in self._clients.values():
            conn.close()
        self._clients.clear()
        if self._epoll is not None:
            self._epoll.close()
            self._epoll = None
        self._socket.close()

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="epollserve", description="Run the echo server.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="IPv4 address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="TCP port to listen on")
    args = parser.parse_args(argv)
    try:
        with Server(EndPoint(args.host, args.port)) as server:
            server.start()
    except KeyboardInterrupt:
        return 0
    except (ServerError, ValueError) as exc:
        print(f"epollserve: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())