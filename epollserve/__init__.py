"""An epoll-driven TCP echo server and client with a background stream logger."""

__version__ = "0.1.0"

__all__ = ["client", "endpoint", "epoll", "logger", "server", "sockets"]