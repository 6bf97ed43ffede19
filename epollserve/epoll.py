"""An epoll instance that remembers a data value for each registered fd."""

from __future__ import annotations

import select
from typing import Callable, Protocol, Union

from .endpoint import ServerError

MAX_EVENTS = 1024


class _HasFileno(Protocol):
    def fileno(self) -> int: ...


FileLike = Union[int, _HasFileno]
WaitCallback = Callable[[int, int, int], None]


def _fd_of(fd: FileLike) -> int:
    return fd if isinstance(fd, int) else fd.fileno()


def _describe(action: str, exc: OSError) -> str:
    return f"failed to {action}, errno={exc.errno} errmsg={exc.strerror}"


class Epoll:
    """Wraps an epoll instance; callbacks get ``(fd, events, data)``."""

    def __init__(self) -> None:
        try:
            self._epoll: select.epoll | None = select.epoll()
        except OSError as exc:
            raise ServerError(_describe("create epoll instance", exc)) from exc
        self._data: dict[int, int] = {}

    def _require_open(self) -> select.epoll:
        if self._epoll is None:
            raise ServerError("epoll instance is closed")
        return self._epoll

    def add_fd(self, fd: FileLike, data: int = 0, events: int = select.EPOLLIN) -> None:
        """Watch *fd* for *events*, attaching *data* to its notifications."""
        epoll = self._require_open()
        number = _fd_of(fd)
        try:
            epoll.register(number, events)
        except OSError as exc:
            raise ServerError(_describe("add fd to epoll", exc)) from exc
        self._data[number] = data

    def del_fd(self, fd: FileLike) -> None:
        epoll = self._require_open()
        number = _fd_of(fd)
        try:
            epoll.unregister(number)
        except OSError as exc:
            raise ServerError(_describe("delete fd from epoll", exc)) from exc
        self._data.pop(number, None)

    def wait(self, callback: WaitCallback, timeout: float | None = None) -> int:
        """Wait for events, call *callback* for each, and return how many there were.

        With no *timeout* the call blocks until at least one event arrives.
        """
        epoll = self._require_open()
        try:
            ready = epoll.poll(-1 if timeout is None else timeout, MAX_EVENTS)
        except OSError as exc:
            raise ServerError(_describe("wait for epoll events", exc)) from exc
        for fd, events in ready:
            callback(fd, events, self._data.get(fd, 0))
        return len(ready)

    def fileno(self) -> int:
        """The epoll file descriptor, or -1 once closed."""
        return -1 if self._epoll is None else self._epoll.fileno()

    def close(self) -> None:
        if self._epoll is not None:
            self._epoll.close()
            self._epoll = None
        self._data.clear()

    def __enter__(self) -> Epoll:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()