"""
Logging configuration for the API client.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 5


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Configuration for the structured client logger.

    Attributes:
        level: Minimum level emitted by the client logger
        format: ``json`` (one object per line) or ``text``
        enable_console: Write records to stdout
        enable_file: Write records to a rotating file at ``file_path``
        file_path: Log file location
        max_bytes: File size that triggers rotation
        backup_count: Rotated files kept next to the current one
        enable_request_id: Tag records with the id of the call in flight
        log_headers: Include the (masked) request headers in ``Request started``
        extra_fields: Static fields added to every record (service, environment, ...)

    Example:
        >>> config = LoggingConfig.create(level="debug", format="json", extra_fields={"service": "timeline-sync"})
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = DEFAULT_MAX_BYTES
    backup_count: int = DEFAULT_BACKUP_COUNT
    enable_request_id: bool = True
    log_headers: bool = True
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        if self.max_bytes < 0 or self.backup_count < 0:
            raise ValueError("max_bytes and backup_count must be non-negative")

    @classmethod
    def create(cls, level: str = "INFO", format: str = "text", **options: Any) -> "LoggingConfig":
        """
        Build a config from plain strings.

        Level and format are case-insensitive; the remaining keyword
        arguments are passed to the constructor unchanged.
        """
        extra_fields = options.pop("extra_fields", None) or {}
        return cls(
            level=LogLevel(level.upper()),
            format=LogFormat(format.lower()),
            extra_fields=dict(extra_fields),
            **options,
        )
