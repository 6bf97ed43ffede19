import os
import threading
import time

import pytest

from epollserve import logger as logger_module
from epollserve.logger import (
    BlockingQueue,
    Logger,
    LogStatus,
    file_handler,
    get_log_status,
    log,
    stderr_handler,
)


@pytest.fixture
def clean_status(monkeypatch):
    monkeypatch.delenv("WEBSERVER_LOG_TO_STDERR", raising=False)
    monkeypatch.delenv("WEBSERVER_LOG_FILE", raising=False)
    logger_module._shutdown()
    get_log_status.cache_clear()
    yield
    logger_module._shutdown()
    status = get_log_status()
    if status.log_file is not None:
        os.close(status.log_file)
    get_log_status.cache_clear()


def test_queue_is_fifo():
    queue = BlockingQueue()
    for item in ("a", "b", "c"):
        queue.push(item)
    assert [queue.pop(), queue.pop(), queue.pop()] == ["a", "b", "c"]
    assert queue.empty() is True


def test_queue_stop_returns_none_when_empty():
    queue = BlockingQueue()
    queue.stop()
    assert queue.pop() is None


def test_queue_drains_after_stop_and_ignores_new_items():
    queue = BlockingQueue()
    queue.push(1)
    queue.stop()
    queue.push(2)
    assert queue.pop() == 1
    assert queue.pop() is None


def test_queue_pop_blocks_until_push():
    queue = BlockingQueue()

    def produce():
        time.sleep(0.1)
        queue.push("late")

    producer = threading.Thread(target=produce)
    started = time.monotonic()
    producer.start()
    value = queue.pop()
    elapsed = time.monotonic() - started
    producer.join(timeout=5)
    assert value == "late"
    assert elapsed >= 0.05
    assert queue.empty() is True


def test_log_status_enabled():
    assert LogStatus(log_to_stderr=False, log_file=None).enabled() is False
    assert LogStatus(log_to_stderr=True, log_file=None).enabled() is True
    assert LogStatus(log_to_stderr=False, log_file=3).enabled() is True


def test_logger_delivers_in_order_to_all_handlers():
    first, second = [], []
    logger = Logger()
    logger.append_handler(first.append)
    logger.append_handler(second.append)
    for i in range(20):
        logger.log(f"msg{i}")
    logger.close()
    expected = [f"msg{i}" for i in range(20)]
    assert first == expected
    assert second == expected


def test_logger_ignores_messages_after_close():
    received = []
    with Logger() as logger:
        logger.append_handler(received.append)
        logger.log("before")
    logger.log("after")
    assert received == ["before"]


def test_stderr_handler_appends_newline(capsys):
    stderr_handler("line")
    assert capsys.readouterr().err == "line\n"


def test_log_disabled_without_environment(clean_status):
    assert get_log_status().enabled() is False
    log("nothing")
    assert logger_module._default_logger is None


def test_log_to_stderr(clean_status, monkeypatch, capsys):
    monkeypatch.setenv("WEBSERVER_LOG_TO_STDERR", "1")
    log("Hello, World!")
    log("Hello, World2!")
    log("Hello, World3!")
    logger_module._shutdown()
    err = capsys.readouterr().err
    assert "Hello, World!" in err
    assert "Hello, World2!" in err
    assert "Hello, World3!" in err
    assert err.index("Hello, World!") < err.index("Hello, World2!") < err.index("Hello, World3!")
    assert "test_logger.py: " in err


def test_log_to_file(clean_status, monkeypatch, tmp_path):
    path = tmp_path / "server.log"
    monkeypatch.setenv("WEBSERVER_LOG_FILE", str(path))
    status = get_log_status()
    assert status.log_file is not None
    assert status.log_to_stderr is False
    log("written to file")
    logger_module._shutdown()
    contents = path.read_text()
    assert contents.endswith(": written to file\n")


def test_file_handler_writes_whole_message(clean_status, monkeypatch, tmp_path):
    path = tmp_path / "direct.log"
    monkeypatch.setenv("WEBSERVER_LOG_FILE", str(path))
    status = get_log_status()
    assert status.log_to_stderr is False
    assert status.enabled() is True
    file_handler("first\n")
    file_handler("second\n")
    assert os.fstat(status.log_file).st_size == len("first\nsecond\n")
    assert path.read_text() == "first\nsecond\n"


def test_unopenable_log_file_disables_file_logging(clean_status, monkeypatch, tmp_path, capsys):
    monkeypatch.setenv("WEBSERVER_LOG_FILE", str(tmp_path / "missing" / "x.log"))
    assert get_log_status().log_file is None
    assert "Failed to open log file" in capsys.readouterr().err