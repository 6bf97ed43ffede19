"""A blocking TCP client that sends text and reads the reply."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .endpoint import EndPoint, ServerError
from .logger import log
from .sockets import Socket

_BUFFER_SIZE = 4096


@dataclass(frozen=True)
class ConnectionFailed:
    """Why a connection attempt to a server did not succeed."""

    errno: int
    message: str

    def __str__(self) -> str:
        return f"[Client] connection failed, errno={self.errno}, errmsg={self.message}"


class Client:
    """Connects to a server, writes messages and reads replies."""

    def __init__(self) -> None:
        self._socket = Socket()

    def connect(self, endpoint: EndPoint) -> None:
        """Connect to *endpoint*; raise :class:`ServerError` if that fails."""
        try:
            self._socket.connect(endpoint)
        except ServerError as exc:
            raise ServerError(f"failed to connect to server: {exc}") from exc

    def send(self, message: str | bytes) -> None:
        """Write *message* to the server; a failure is logged, not raised."""
        data = message.encode() if isinstance(message, str) else message
        try:
            os.write(self._socket.fileno(), data)
        except OSError as exc:
            log(f"[Client] failed to send message to server, errno: {exc.errno}")

    def recv(self) -> str:
        """Read the server's reply.

        Reading stops when the server closes the connection or when a read
        returns less than a full buffer. A read error is logged and gives an
        empty string.
        """
        chunks: list[bytes] = []
        fd = self._socket.fileno()
        while True:
            try:
                data = os.read(fd, _BUFFER_SIZE)
            except BlockingIOError:
                continue
            except OSError as exc:
                log(f"[Client] failed to receive message from server, errno: {exc.errno}")
                return ""
            if not data:
                log("[Client] connection closed by server")
                break
            chunks.append(data)
            if len(data) < _BUFFER_SIZE - 1:
                log("[Client] received finish from server")
                break
        return b"".join(chunks).decode("utf-8", errors="replace")

    def close(self) -> None:
        self._socket.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()