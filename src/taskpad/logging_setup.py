# src/taskpad/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "taskpad.log"

# Loggers that chatter on every keystroke or timer tick; stderr only sees their problems.
QUIET_LOGGERS: dict[str, int] = {
    "taskpad.core.timers": logging.WARNING,
    "taskpad.effects.falling_chars": logging.WARNING,
    "taskpad.tasks.task_persistence": logging.WARNING,
}


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keeps the REPL readable while the timer pump runs in the background.

    The prompt shares stderr/stdout with log lines, so only store and command
    messages reach the console at full level. Everything lands in the file.
    """

    def __init__(self, quiet: dict[str, int] | None = None) -> None:
        super().__init__()
        self._quiet = dict(QUIET_LOGGERS if quiet is None else quiet)

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if not name.startswith("taskpad."):
            # third-party and captured py.warnings
            return record.levelno >= logging.ERROR
        threshold = self._quiet.get(name)
        return threshold is None or record.levelno >= threshold


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskpad",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """Install the console + file handlers on the root logger. Returns the log file path."""
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
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
