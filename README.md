# epollserve

A small TCP echo server built on Linux `epoll`, together with a matching
client and a background logger that writes to standard error or to a file.
It runs on Linux only, since it relies on `select.epoll`.

## Modules

- `epollserve.endpoint` — `EndPoint` (an IPv4 host string and a port),
  `EndPointV2` (an IPv4 address held as a 32-bit number and a port, shown as
  `{EP: 1.2.3.4:80}`), the `ServerError` exception raised when a socket,
  epoll or server operation fails, and `errif(condition, message)`, which
  raises `ServerError` when the condition holds.
- `epollserve.sockets` — `Socket`, a TCP/IPv4 socket with `bind`, `listen`,
  `accept` (returning the new `Socket` and the peer's `EndPoint`), `connect`,
  `fileno` and `close`; it can wrap an existing socket or file descriptor and
  closes itself when used as a context manager.
- `epollserve.epoll` — `Epoll`, which watches file descriptors (or objects
  with `fileno()`) for the given event mask, edge- or level-triggered, and
  calls `callback(fd, events, data)` for each ready event in `wait()`.
  `wait()` blocks unless given a `timeout` and returns the number of events.
- `epollserve.logger` — `BlockingQueue`, a queue-backed `Logger` that hands
  messages to its handlers on a background thread, `get_log_status()`,
  `stderr_handler`, `file_handler`, and the module-level `log()` used
  throughout the package, which prefixes each message with the caller's file
  and line.
- `epollserve.client` — `Client`, which connects to a server, sends a message
  and reads the reply, and `ConnectionFailed`, a record of a failed
  connection attempt (an errno and a message).
- `epollserve.server` — `Server`, the echo server, `handle_read(fd)`, which
  echoes everything readable on a descriptor back to it, and `main`, the
  command-line entry point.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
epollserve-server
```

By default the server listens on `127.0.0.1:8080`. Use `--host` and `--port`
to choose another address:

```
epollserve-server --host 0.0.0.0 --port 9000
```

It accepts connections, and writes back every message it reads from a client
until the client closes the connection. Stop it with Ctrl-C. If it cannot
bind or listen, it prints the error and exits with status 1.

From Python, `Server(endpoint)` sets up the listening socket;
`handle_events(timeout)` handles one round of events and `start()` serves
forever. A `Server` is also a context manager that closes every connection.

## Talking to it

```python
from epollserve.client import Client
from epollserve.endpoint import EndPoint

with Client() as client:
    client.connect(EndPoint("127.0.0.1", 8080))
    client.send("hello")
    print(client.recv())
```

`recv()` reads until the server closes the connection or a read returns less
than a full buffer. Send and receive failures are logged rather than raised;
a failed receive returns an empty string. A failed `connect` raises
`ServerError`.

## Logging

Logging is switched off unless one of these environment variables is set
before the first message is logged:

- `WEBSERVER_LOG_TO_STDERR=1` writes each message to standard error.
- `WEBSERVER_LOG_FILE=/path/to/file.log` appends each message to that file.

Both may be set at once. Messages are handed to a background thread, so a
slow log destination does not hold up the server; queued messages are
delivered when the process exits.

## What it does not do

The server only echoes bytes back; it does not speak HTTP or any other
protocol. There is no connection pool: `ConnectionFailed` is a plain record
and nothing in the package creates pools of connections.