"""
Log record formatters for SystemReporter.

- JsonFormatter: one JSON object per line (production, log shippers)
- TextFormatter: human-readable line (development)
"""

import json
import logging
from datetime import datetime, timezone

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | [%(context)s] %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ContextFilter(logging.Filter):
    """
    Ensure every record carries a context.

    Records from SystemReporter set it explicitly; records from other
    loggers (uvicorn) fall back to the logger name.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            record.context = record.name
        return True


class JsonFormatter(logging.Formatter):
    """Format records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname.lower(),
            "context": getattr(record, "context", record.name),
            "msg": record.getMessage(),
        }

        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Format records as "time | LEVEL | [context] message" lines."""

    def __init__(self) -> None:
        super().__init__(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)
