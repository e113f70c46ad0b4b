"""
Logging helpers.

Backend and frontend records are written to date-stamped files under the
log directory and echoed to the console, one line per record::

    [2024-05-01 13:45:12.345 PST/PDT] [INFO] [API] Blast recorded | Data: {...}
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from pikablast.config import APP_ENV, LOG_DIR, LOG_TIMEZONE

BACKEND_LOGGER = "pikablast"
FRONTEND_LOGGER = "pikablast.frontend"

_ZONE = ZoneInfo(LOG_TIMEZONE)

_LEVEL_LABELS: dict[int, str] = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "ERROR",
}

_FRONTEND_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def pacific_now() -> datetime:
    return datetime.now(_ZONE)


def pacific_date(moment: datetime | None = None) -> str:
    """``YYYY-MM-DD`` in Pacific time."""
    moment = moment or pacific_now()
    return moment.astimezone(_ZONE).strftime("%Y-%m-%d")


def pacific_timestamp(moment: datetime | None = None) -> str:
    """Millisecond timestamp in Pacific time, e.g. ``2024-05-01 13:45:12.345 PST/PDT``."""
    moment = (moment or pacific_now()).astimezone(_ZONE)
    return f"{moment:%Y-%m-%d %H:%M:%S}.{moment.microsecond // 1000:03d} PST/PDT"


class PacificFormatter(logging.Formatter):
    """Formats records as ``[timestamp] [LEVEL] [SOURCE] message | Data: json``."""

    def __init__(self, default_source: str = "SERVER") -> None:
        super().__init__()
        self.default_source = default_source

    def format(self, record: logging.LogRecord) -> str:
        stamp = pacific_timestamp(datetime.fromtimestamp(record.created, _ZONE))
        label = getattr(record, "label", None) or _LEVEL_LABELS.get(
            record.levelno, record.levelname
        )
        source = getattr(record, "source", None) or self.default_source

        line = f"[{stamp}] [{label}] [{source}] {record.getMessage()}"
        data = getattr(record, "data", None)
        if data is not None:
            line += f" | Data: {json.dumps(data, default=str)}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class DailyFileHandler(logging.FileHandler):
    """Appends to ``<prefix>-YYYY-MM-DD.log``, switching files when the Pacific date changes."""

    def __init__(self, log_dir: str | Path, prefix: str) -> None:
        self.log_dir = Path(log_dir)
        self.prefix = prefix
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._date = pacific_date()
        super().__init__(self.path_for(self._date), encoding="utf-8", delay=True)

    def path_for(self, date: str) -> Path:
        return self.log_dir / f"{self.prefix}-{date}.log"

    def emit(self, record: logging.LogRecord) -> None:
        date = pacific_date(datetime.fromtimestamp(record.created, _ZONE))
        if date != self._date:
            if self.stream is not None:
                self.stream.close()
                self.stream = None
            self._date = date
            self.baseFilename = os.path.abspath(self.path_for(date))
        super().emit(record)


def configure_logging(log_dir: str | Path = LOG_DIR, env: str = APP_ENV) -> None:
    """
    Attach console and daily file handlers to the backend and frontend loggers.

    Safe to call more than once: handlers installed by a previous call are
    closed and replaced. DEBUG records always reach the files but are kept
    off the console in production.
    """
    console_level = logging.INFO if env == "production" else logging.DEBUG

    for name, prefix, source in (
        (BACKEND_LOGGER, "backend", "SERVER"),
        (FRONTEND_LOGGER, "frontend", "FRONTEND"),
    ):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            if getattr(handler, "_pikablast", False):
                logger.removeHandler(handler)
                handler.close()

        formatter = PacificFormatter(default_source=source)

        file_handler = DailyFileHandler(log_dir, prefix)
        file_handler.setLevel(logging.DEBUG)

        console = logging.StreamHandler()
        console.setLevel(console_level)

        for handler in (file_handler, console):
            handler.setFormatter(formatter)
            handler._pikablast = True  # type: ignore[attr-defined]
            logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)

    # Frontend lines go to their own file only
    logging.getLogger(FRONTEND_LOGGER).propagate = False


def log_frontend(
    level: str,
    message: str,
    stack: str | None = None,
    data: Any = None,
) -> None:
    """Mirror one browser console entry into the frontend log."""
    label = level.upper()
    payload: dict[str, Any] = {"message": message, "stack": stack}
    if isinstance(data, dict):
        payload.update(data)
    elif data is not None:
        payload["data"] = data

    logging.getLogger(FRONTEND_LOGGER).log(
        _FRONTEND_LEVELS.get(label, logging.INFO),
        message,
        extra={"source": "FRONTEND", "label": label, "data": payload},
    )
