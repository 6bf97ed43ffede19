"""Asynchronous logging to stderr and/or a file chosen by the environment."""

from __future__ import annotations

import atexit
import functools
import os
import sys
import threading
from collections import deque
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

LogHandler = Callable[[str], None]

_ENV_TO_STDERR = "WEBSERVER_LOG_TO_STDERR"
_ENV_LOG_FILE = "WEBSERVER_LOG_FILE"


class BlockingQueue(Generic[T]):
    """A thread-safe FIFO queue whose ``pop`` blocks until an item or a stop."""

    def __init__(self) -> None:
        self._items: deque[T] = deque()
        self._not_empty = threading.Condition()
        self._stopped = False

    def push(self, value: T) -> None:
        """Append *value*; ignored once the queue has been stopped."""
        with self._not_empty:
            if self._stopped:
                return
            self._items.append(value)
            self._not_empty.notify()

    def pop(self) -> T | None:
        """Remove and return the oldest item, or None when stopped and empty."""
        with self._not_empty:
            while not self._items and not self._stopped:
                self._not_empty.wait()
            if not self._items:
                return None
            return self._items.popleft()

    def stop(self) -> None:
        """Stop accepting items and wake every waiting consumer."""
        with self._not_empty:
            self._stopped = True
            self._not_empty.notify_all()

    def empty(self) -> bool:
        with self._not_empty:
            return not self._items


@dataclass(frozen=True)
class LogStatus:
    """Where log output goes: stderr and/or an open file descriptor."""

    log_to_stderr: bool
    log_file: int | None

    def enabled(self) -> bool:
        return self.log_to_stderr or self.log_file is not None


def _open_log_file() -> int | None:
    path = os.environ.get(_ENV_LOG_FILE)
    if path is None:
        return None
    flags = os.O_WRONLY | os.O_CREAT | os.O_APPEND | getattr(os, "O_CLOEXEC", 0)
    try:
        return os.open(path, flags, 0o644)
    except OSError:
        print(f"[webserver::utils] Failed to open log file: {path}", file=sys.stderr)
        return None


@functools.lru_cache(maxsize=None)
def get_log_status() -> LogStatus:
    """Read the logging settings from the environment, once."""
    return LogStatus(
        log_to_stderr=os.environ.get(_ENV_TO_STDERR) == "1",
        log_file=_open_log_file(),
    )


def stderr_handler(message: str) -> None:
    sys.stderr.write(message + "\n")


def file_handler(message: str) -> None:
    """Write *message* in full to the configured log file."""
    fd = get_log_status().log_file
    if fd is None:
        print("[webserver::utils] Failed to write to log file", file=sys.stderr)
        return
    data = message.encode()
    while data:
        try:
            written = os.write(fd, data)
        except OSError:
            print("[webserver::utils] Failed to write to log file", file=sys.stderr)
            break
        data = data[written:]


class Logger:
    """Hands messages to its handlers from a background thread."""

    def __init__(self) -> None:
        self._handlers: list[LogHandler] = []
        self._queue: BlockingQueue[str] = BlockingQueue()
        self._worker = threading.Thread(target=self._run, daemon=True)
        self._worker.start()

    def _run(self) -> None:
        while (message := self._queue.pop()) is not None:
            for handle in self._handlers:
                handle(message)

    def log(self, message: str) -> None:
        self._queue.push(message)

    def append_handler(self, handler: LogHandler) -> None:
        self._handlers.append(handler)

    def close(self) -> None:
        """Deliver every queued message, then stop the worker thread."""
        self._queue.stop()
        if self._worker.is_alive() and self._worker is not threading.current_thread():
            self._worker.join()

    def __enter__(self) -> Logger:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


_default_logger: Logger | None = None
_default_lock = threading.Lock()


def _get_default_logger(status: LogStatus) -> Logger:
    global _default_logger
    with _default_lock:
        if _default_logger is None:
            logger = Logger()
            if status.log_to_stderr:
                logger.append_handler(stderr_handler)
            if status.log_file is not None:
                logger.append_handler(file_handler)
            _default_logger = logger
        return _default_logger


def _shutdown() -> None:
    """Flush and discard the process-wide logger."""
    global _default_logger
    with _default_lock:
        logger, _default_logger = _default_logger, None
    if logger is not None:
        logger.close()


atexit.register(_shutdown)


def log(message: object) -> None:
    """Log *message*, prefixed by the caller's file and line, if logging is on."""
    status = get_log_status()
    if not status.enabled():
        return
    caller = sys._getframe(1)
    text = f"{caller.f_code.co_filename}: {caller.f_lineno}: {message}\n"
    _get_default_logger(status).log(text)