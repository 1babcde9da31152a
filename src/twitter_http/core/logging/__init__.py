"""
Structured logging for the API client.

Example:
    >>> from twitter_http.core.logging import HttpClientLogger, LoggingConfig
    >>> logger = HttpClientLogger(LoggingConfig.create(level="DEBUG", format="json"))
    >>> logger.info("Request started", method="GET", url="https://api.example.com")
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import HttpClientLogger, DEFAULT_LOGGER_NAME
from .formatters import JSONFormatter, TextFormatter, get_formatter
from .filters import (
    RequestIdFilter,
    ExtraFieldsFilter,
    set_request_id,
    get_request_id,
    clear_request_id,
)
from .handlers import build_handlers, create_console_handler, create_file_handler

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "HttpClientLogger",
    "DEFAULT_LOGGER_NAME",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "get_formatter",
    # Filters
    "RequestIdFilter",
    "ExtraFieldsFilter",
    "set_request_id",
    "get_request_id",
    "clear_request_id",
    # Handlers
    "create_console_handler",
    "create_file_handler",
    "build_handlers",
]
