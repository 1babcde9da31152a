"""
Log formatters: JSON lines and plain text.

Both render the keyword fields passed to HttpClientLogger (they arrive on
the record through ``extra=``) after the standard part of the record.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Union

from .config import LogFormat

# Attributes every LogRecord has; anything else came in via ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message", "asctime",
}


def extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields passed through ``extra=`` (or added by filters)."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith('_')
    }


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line.

    Example output:
        {"timestamp": "2024-01-15T10:30:45.123000+00:00", "level": "WARNING",
         "logger": "twitter_http", "message": "Request failed",
         "status_code": 429, "error_code": 88, "request_id": "9f1c..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(extra_fields(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """
    ``[time] [level] [logger] [request_id] message key=value ...``

    The request id block is present only while a call is in flight.
    Mappings and lists are rendered as compact JSON.
    """

    def __init__(self):
        super().__init__(datefmt='%Y-%m-%d %H:%M:%S')

    def format(self, record: logging.LogRecord) -> str:
        fields = extra_fields(record)
        request_id = fields.pop("request_id", None)

        parts = [
            f"[{self.formatTime(record, self.datefmt)}]",
            f"[{record.levelname}]",
            f"[{record.name}]",
        ]
        if request_id:
            parts.append(f"[{request_id}]")
        parts.append(record.getMessage())
        parts.extend(f"{key}={self._render(value)}" for key, value in fields.items())

        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line

    @staticmethod
    def _render(value: Any) -> str:
        if isinstance(value, (dict, list, tuple)):
            return json.dumps(value, default=str, separators=(",", ":"))
        return str(value)


FORMATTERS = {
    LogFormat.JSON: JSONFormatter,
    LogFormat.TEXT: TextFormatter,
}


def get_formatter(format_type: Union[str, LogFormat]) -> logging.Formatter:
    """
    Formatter instance for ``json`` or ``text`` (case-insensitive).

    Raises:
        ValueError: If format_type is unknown
    """
    try:
        log_format = LogFormat(format_type.lower() if isinstance(format_type, str) else format_type)
    except ValueError:
        raise ValueError(
            f"Unknown format type: {format_type}. "
            f"Available: {', '.join(f.value for f in LogFormat)}"
        ) from None
    return FORMATTERS[log_format]()
