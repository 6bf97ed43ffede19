"""Network endpoints and the error raised when a server operation fails."""

from __future__ import annotations

import ipaddress
import socket
from dataclasses import dataclass

_MAX_PORT = 0xFFFF
_MAX_IPV4 = 0xFFFFFFFF


class ServerError(Exception):
    """Raised when a socket, epoll or server operation fails."""


def errif(condition: bool, message: str) -> None:
    """Raise :class:`ServerError` with *message* when *condition* holds."""
    if condition:
        raise ServerError(message)


def _check_port(port: int) -> None:
    if not 0 <= port <= _MAX_PORT:
        raise ValueError(f"port out of range: {port}")


@dataclass(frozen=True)
class EndPoint:
    """An IPv4 address and port; the default is the unspecified address."""

    host: str = "0.0.0.0"
    port: int = 0

    def __post_init__(self) -> None:
        try:
            socket.inet_aton(self.host)
        except (OSError, TypeError) as exc:
            raise ValueError(f"invalid IPv4 address: {self.host!r}") from exc
        _check_port(self.port)

    def sockaddr(self) -> tuple[str, int]:
        """Return the address in the form the socket module expects."""
        return (self.host, self.port)


@dataclass(frozen=True)
class EndPointV2:
    """A compact endpoint: the IPv4 address as a 32-bit number and a port."""

    ip: int
    port: int

    def __post_init__(self) -> None:
        if not 0 <= self.ip <= _MAX_IPV4:
            raise ValueError(f"IPv4 address out of range: {self.ip}")
        _check_port(self.port)

    def __str__(self) -> str:
        return f"{{EP: {ipaddress.IPv4Address(self.ip)}:{self.port}}}"

    def __hash__(self) -> int:
        return hash(self.ip) ^ hash(self.port)