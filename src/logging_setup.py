"""Logging configuration for the interactive to-do list.

The console handler stays quiet (WARNING by default) so log lines do not
tear through the redrawn screen; the file handler keeps everything.
"""
from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Union

APP_LOGGERS = ("cli", "main", "models", "storage", "todo_list")
LOG_FILE_NAME = "todo.log"


class _ConsoleNoiseFilter(logging.Filter):
    """Keep our own records; let third-party and py.warnings through only at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.split(".", 1)[0] in APP_LOGGERS:
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: Union[str, Path],
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """Configure the root logger once, early. Returns the log file path."""
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

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
