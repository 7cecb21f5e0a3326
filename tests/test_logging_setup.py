# tests/test_logging_setup.py

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

import pytest

from taskflow.logging_setup import LOG_BACKUP_COUNT, LOG_MAX_BYTES, _ConsoleFilter, setup_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in saved_handlers:
        root.addHandler(h)
    root.setLevel(saved_level)
    logging.captureWarnings(False)


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_setup_logging_writes_rotating_file(tmp_path, restore_root_logging) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.WARNING)

    handlers = logging.getLogger().handlers
    rotating = [h for h in handlers if isinstance(h, RotatingFileHandler)]
    assert len(rotating) == 1
    assert rotating[0].maxBytes == LOG_MAX_BYTES
    assert rotating[0].backupCount == LOG_BACKUP_COUNT

    logging.getLogger("taskflow.test").debug("hello file")
    rotating[0].flush()
    assert "hello file" in log_file.read_text(encoding="utf-8")


def test_console_filter_routes_by_logger() -> None:
    f = _ConsoleFilter()

    assert f.filter(_record("taskflow.tasks.task_store", logging.INFO))
    assert not f.filter(_record("taskflow.tasks.reminder_poller", logging.INFO))
    assert f.filter(_record("taskflow.tasks.reminder_poller", logging.WARNING))
    assert not f.filter(_record("nio.client", logging.WARNING))
    assert f.filter(_record("nio.client", logging.ERROR))
    assert not f.filter(_record("py.warnings", logging.WARNING))
