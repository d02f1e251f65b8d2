"""
Structured JSON logging for the journal.

Records become single-line JSON objects. Journal context attached through
``extra`` or a ``JournalLoggerAdapter`` (which operation ran, which entry it
touched, whether the remote or the mirror served it, and the HTTP request
the reference store handled) is lifted to top-level fields so log queries
can filter on it directly. Any other extra values are grouped under
``context``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any

# Emitted at the top level, in this order, when present on a record
JOURNAL_FIELDS = ("operation", "entry_id", "source", "method", "path", "status")

_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class StructuredJsonFormatter(logging.Formatter):
    """JSON formatter with journal context as first-class fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in JOURNAL_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_obj[field] = _plain(value)

        context = {
            key: _plain(value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and key not in JOURNAL_FIELDS and not key.startswith("_")
        }
        if context:
            log_obj["context"] = context

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str)


def configure_structured_logging(
    level: int = logging.INFO,
    logger_name: str | None = None,
) -> logging.Logger:
    """
    Send a logger's records to stdout as JSON lines.

    Args:
        level: Logging level (default: INFO)
        logger_name: Logger to configure (default: root logger)

    Returns:
        The configured logger
    """
    logger = logging.getLogger(logger_name)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredJsonFormatter())
    logger.addHandler(handler)
    logger.setLevel(level)

    return logger


class JournalLoggerAdapter(logging.LoggerAdapter):
    """
    Tags every record with fixed journal context, e.g. the gateway
    operation and entry id. Per-call ``extra`` values override it.
    """

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs
