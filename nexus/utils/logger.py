from __future__ import annotations

import logging
import os
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator, Optional

LOGGER_NAME = "nexus"
NO_REQUEST = "-"

REQUEST_ID: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST)

LOG_FORMAT = (
    "%(asctime)s %(levelname)-8s %(name)s "
    "pid=%(process)d request_id=%(request_id)s src=%(filename)s:%(lineno)d "
    "%(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUPS = 10


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (shadow built-in name)
        record.request_id = REQUEST_ID.get()
        return True


class ColorFormatter(logging.Formatter):
    """
    Console formatter: blue timestamp, one color per level.
    Plain output when NO_COLOR is set or stdout is not a TTY.
    """

    RESET = "\x1b[0m"
    BLUE = "\x1b[34m"
    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[36m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[35m",
    }

    def __init__(self, *args, enable_color: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.enable_color = enable_color

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{self.RESET}" if self.enable_color else text

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        return self._paint(super().formatTime(record, datefmt), self.BLUE)

    def format(self, record: logging.LogRecord) -> str:
        if not self.enable_color:
            return super().format(record)
        original = record.levelname
        record.levelname = self._paint(original, self.LEVEL_COLORS.get(record.levelno, ""))
        try:
            return super().format(record)
        finally:
            record.levelname = original


def _color_supported(stream) -> bool:
    if os.getenv("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _file_handler(log_dir: Path, log_file: str) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(log_dir / log_file),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ColorFormatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT, enable_color=_color_supported(sys.stdout))
    )
    return handler


def configure_logging(
    *,
    log_dir: str | Path | None = None,
    log_file: str = "nexus.log",
    level: str | None = None,
    console: bool | None = None,
) -> logging.Logger:
    """
    Return the "nexus" logger, attaching its handlers on first use.

    Every module calls this at import time. Unset arguments fall back to
    LOG_DIR, LOG_LEVEL and LOG_TO_CONSOLE from settings.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if getattr(logger, "_configured", False):
        return logger

    from nexus.config import settings

    numeric_level = logging.getLevelNamesMapping().get((level or settings.log_level).upper(), logging.INFO)
    handlers = [_file_handler(Path(log_dir or settings.log_dir), log_file)]
    if settings.log_to_console if console is None else console:
        handlers.append(_console_handler())

    request_filter = RequestIdFilter()
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.addFilter(request_filter)
        logger.addHandler(handler)
    logger.setLevel(numeric_level)
    logger.propagate = False
    logger._configured = True  # type: ignore[attr-defined]
    return logger


@contextmanager
def bound_request_id(request_id: Optional[str] = None) -> Iterator[str]:
    """Tag every record logged inside the block with one request id (generated when absent)."""
    rid = request_id or str(uuid.uuid4())
    token = REQUEST_ID.set(rid)
    try:
        yield rid
    finally:
        REQUEST_ID.reset(token)


class log_request:
    """
    Time a unit of work and log its outcome with key=value fields:
      with log_request(logger, "dashboard.student", user=user_id):
          ...
    """

    def __init__(self, logger: logging.Logger, name: str, **fields):
        self.logger = logger
        self.name = name
        self.fields = " ".join(f"{k}={v}" for k, v in fields.items())
        self.start = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        self.logger.debug("start %s %s", self.name, self.fields)
        return self

    def __exit__(self, exc_type, exc, tb):
        dur_ms = int((time.perf_counter() - self.start) * 1000)
        if exc is None:
            self.logger.info("%s ok %s duration_ms=%s", self.name, self.fields, dur_ms)
        else:
            self.logger.warning("%s failed %s duration_ms=%s error=%s", self.name, self.fields, dur_ms, exc_type.__name__)
        return False
