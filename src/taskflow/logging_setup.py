# src/taskflow/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "taskflow.log"
LOG_MAX_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3

# Fired reminders reach the user as alerts; only poller problems go to the console.
_QUIET_BELOW_WARNING = ("taskflow.tasks.reminder_poller",)


class _ConsoleFilter(logging.Filter):
    """taskflow logs pass; nio/aiohttp and captured warnings only at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if not name.startswith("taskflow."):
            return record.levelno >= logging.ERROR
        if name.startswith(_QUIET_BELOW_WARNING):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(*, log_dir: str | Path, console_level: int = logging.INFO) -> Path:
    """
    Console handler on stderr (filtered, so the >>> prompt stays readable)
    plus a rotating DEBUG log in log_dir. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleFilter())
    root.addHandler(console)

    file_handler = RotatingFileHandler(
        log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
