# src/airdrop_tracker/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from logging.handlers import RotatingFileHandler
from pathlib import Path

APP_LOGGER = "airdrop_tracker"
LOG_FILE_NAME = "airdrop.log"

# Progress writes finish on a worker thread, after the prompt is back.
BACKGROUND_LOGGERS = ("airdrop_tracker.tracker.persistence",)

NOISY_LIBS = ("httpx", "httpcore")


class ConsoleFilter(logging.Filter):
    """
    Console only shows what matters while someone is typing commands.

    App records pass; background loggers need WARNING; anything else needs ERROR.
    """

    def __init__(self, app: str = APP_LOGGER, background: Iterable[str] = BACKGROUND_LOGGERS) -> None:
        super().__init__()
        self._app = app
        self._background = tuple(background)

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name != self._app and not name.startswith(self._app + "."):
            return record.levelno >= logging.ERROR
        if any(name == b or name.startswith(b + ".") for b in self._background):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/airdrop",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 2_000_000,
    backup_count: int = 3,
) -> Path:
    """
    Install a filtered stderr handler and a rotating file handler on the root logger.

    Replaces existing root handlers, so calling it twice does not duplicate output.
    Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    console.addFilter(ConsoleFilter())
    root.addHandler(console)

    file_handler = RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s")
    )
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    for lib in NOISY_LIBS:
        logging.getLogger(lib).setLevel(logging.WARNING)

    return log_file
