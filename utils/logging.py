"""
Structured logging: JSON for cloud aggregators, readable format for dev.
Configured from env (LOG_LEVEL, LOG_JSON).
"""

import json
import logging
import sys
from typing import Any, MutableMapping

from core.config import get_settings

# LogRecord attributes that are not user-supplied extras.
_RESERVED_ATTRS = frozenset(
    (
        "name", "msg", "args", "created", "filename", "funcName", "levelname", "levelno",
        "lineno", "module", "msecs", "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "message", "taskName", "thread", "threadName",
    )
)


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger with app-level config applied.
    Use logger.info("event", extra={"key": "value"}) for structured fields.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    settings = get_settings()
    logger.setLevel(settings.python_log_level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logger.level)
    handler.addFilter(_RequestIdFilter())
    if settings.LOG_JSON:
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s"
            )
        )
    logger.addHandler(handler)
    logger.propagate = False
    return logger


class RequestLogger(logging.LoggerAdapter):
    """Child logger bound to a request id; call-site extras are merged, not replaced."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_request_logger(logger: logging.Logger, request_id: str) -> RequestLogger:
    """Scope logger to a single request; every record carries request_id."""
    return RequestLogger(logger, {"request_id": request_id})


class _RequestIdFilter(logging.Filter):
    """Default request_id so the text format works outside a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        return True


class _JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON for CloudWatch, Datadog, etc."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        # Merge extra dict into top level for structured search
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_obj[key] = value
        return json.dumps(log_obj, default=str)
