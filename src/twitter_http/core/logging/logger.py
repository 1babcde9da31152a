"""
Structured logger used by the request executor.

Extra fields are passed as keyword arguments and masked before they reach
any handler.
"""

import logging
from typing import Any, List, Optional

from .config import LoggingConfig
from .filters import ExtraFieldsFilter, RequestIdFilter
from .formatters import get_formatter
from .handlers import build_handlers
from ...utils.sanitizer import mask_sensitive_data

DEFAULT_LOGGER_NAME = "twitter_http"


class HttpClientLogger:
    """
    Wrapper around :class:`logging.Logger` with structured keyword fields.

    Without a config the logger installs no handlers and leaves records to
    the application's logging setup. With a config it owns its handlers and
    stops propagation.

    Example:
        >>> logger = HttpClientLogger(LoggingConfig.create(format="json"))
        >>> logger.info("Request started", method="GET", url="https://api.example.com")
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = DEFAULT_LOGGER_NAME):
        self.config = config
        self.name = name
        self._closed = False
        self._logger = logging.getLogger(name)

        if config is not None:
            self._install_handlers(config)

    def _install_handlers(self, config: LoggingConfig) -> None:
        self._logger.setLevel(getattr(logging, config.level.value))
        self._logger.propagate = False
        self._logger.handlers.clear()

        filters: List[logging.Filter] = []
        if config.enable_request_id:
            filters.append(RequestIdFilter())
        if config.extra_fields:
            filters.append(ExtraFieldsFilter(config.extra_fields))

        for handler in build_handlers(config, get_formatter(config.format.value), filters):
            self._logger.addHandler(handler)

    def _log(self, level: int, message: str, fields: dict, exc_info: bool = False) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, message, extra=mask_sensitive_data(fields), exc_info=exc_info)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """
        Log info message.

        Example:
            >>> logger.info("Request completed", status_code=200, duration_ms=150)
        """
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log an error with the current traceback; call from an except block."""
        self._log(logging.ERROR, message, kwargs, exc_info=True)

    def close(self) -> None:
        """
        Flush and close owned handlers. Idempotent.

        A logger created without a config owns no handlers and leaves the
        named logger untouched.
        """
        if self._closed:
            return
        self._closed = True

        if self.config is None:
            return

        for handler in self._logger.handlers[:]:
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)
        self._logger.propagate = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
