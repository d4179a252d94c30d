"""Logging setup shared by the API, the webhook handlers and the CLI.

All application loggers hang off the ``cms_search`` root so a single call to
:func:`setup_logging` controls the whole tree. Hosted deployments usually set
``LOG_JSON=true`` and ship one JSON document per line.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "cms_search"

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "qdrant_client")

# LogRecord attributes that are never copied into the "extra" block
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}


class JSONExceptionFormatter(logging.Formatter):
    """Render each record as a single-line JSON document.

    Values passed through ``extra=`` (record ids, content types, request
    paths) are kept under ``extra`` so they can be filtered on.
    """

    def format(self, record: logging.LogRecord) -> str:
        document: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "source": f"{record.filename}:{record.lineno}",
            "function": record.funcName,
        }

        extra = {key: value for key, value in vars(record).items() if key not in _STANDARD_ATTRS}
        if extra:
            document["extra"] = extra

        exc_type, exc_value, _ = record.exc_info or (None, None, None)
        if exc_type is not None:
            document["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value) if exc_value is not None else None,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(document, default=str)


def _make_handler(handler: logging.Handler, formatter: logging.Formatter) -> logging.Handler:
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    json_format: bool = False,
) -> logging.Logger:
    """(Re)configure the ``cms_search`` logger tree.

    Calling it twice replaces the previous handlers instead of stacking
    them, which matters under uvicorn's reloader.

    Args:
        level: Level name; unknown names fall back to INFO.
        log_file: Optional path that receives a copy of every record.
        json_format: Emit JSON lines instead of the pipe-separated text format.

    Returns:
        The application root logger.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    formatter: logging.Formatter
    if json_format:
        formatter = JSONExceptionFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)

    handlers = [_make_handler(logging.StreamHandler(sys.stdout), formatter)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(_make_handler(logging.FileHandler(log_file, encoding="utf-8"), formatter))

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(numeric_level)
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    for handler in handlers:
        root.addHandler(handler)
    root.propagate = False

    if numeric_level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return root


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``cms_search`` or the ``cms_search.<name>`` child logger."""
    return logging.getLogger(ROOT_LOGGER_NAME if not name else f"{ROOT_LOGGER_NAME}.{name}")
