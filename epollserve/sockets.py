"""A TCP/IPv4 socket that reports failures as :class:`ServerError`."""

from __future__ import annotations

import socket

from .endpoint import EndPoint, ServerError, errif


class Socket:
    """An IPv4 stream socket; created fresh or wrapping an existing one."""

    def __init__(self, sock: socket.socket | int | None = None) -> None:
        if isinstance(sock, int):
            errif(sock == -1, "fd is invalid")
            try:
                sock = socket.socket(fileno=sock)
            except OSError as exc:
                raise ServerError(f"fd is invalid: {exc.strerror}") from exc
        elif sock is None:
            try:
                sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            except OSError as exc:
                raise ServerError(f"failed to create socket: {exc.strerror}") from exc
        self._sock = sock

    def bind(self, endpoint: EndPoint) -> None:
        try:
            self._sock.bind(endpoint.sockaddr())
        except OSError as exc:
            raise ServerError(f"failed to bind socket: {exc.strerror}") from exc

    def listen(self, backlog: int = 128) -> None:
        try:
            self._sock.listen(backlog)
        except OSError as exc:
            raise ServerError(f"failed to listen socket: {exc.strerror}") from exc

    def accept(self) -> tuple[Socket, EndPoint]:
        """Accept a connection; return its socket and the peer's endpoint."""
        try:
            conn, (host, port) = self._sock.accept()
        except OSError as exc:
            raise ServerError(f"failed to accept socket: {exc.strerror}") from exc
        return Socket(conn), EndPoint(host, port)

    def connect(self, endpoint: EndPoint) -> None:
        try:
            self._sock.connect(endpoint.sockaddr())
        except OSError as exc:
            raise ServerError(f"failed to connect socket: {exc.strerror}") from exc

    def fileno(self) -> int:
        """The file descriptor, or -1 once closed."""
        return self._sock.fileno()

    def close(self) -> None:
        self._sock.close()

    def __enter__(self) -> Socket:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()