"""
Output handlers for the client logger.

Handlers carry the formatter and filters only; the level is enforced on
the logger itself.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import IO, List, Optional, Sequence

from .config import LoggingConfig


def _attach(handler: logging.Handler, formatter: logging.Formatter, filters: Sequence[logging.Filter]):
    handler.setFormatter(formatter)
    for log_filter in filters:
        handler.addFilter(log_filter)
    return handler


def create_console_handler(
    formatter: logging.Formatter,
    filters: Sequence[logging.Filter] = (),
    stream: Optional[IO[str]] = None,
) -> logging.StreamHandler:
    """Handler writing to ``stream`` (stdout by default)."""
    return _attach(logging.StreamHandler(stream or sys.stdout), formatter, filters)


def create_file_handler(
    config: LoggingConfig,
    formatter: logging.Formatter,
    filters: Sequence[logging.Filter] = (),
) -> RotatingFileHandler:
    """
    Rotating file handler for ``config.file_path``.

    Missing parent directories are created. Rotation keeps
    ``client.log``, ``client.log.1`` ... ``client.log.{backup_count}``.
    """
    if not config.file_path:
        raise ValueError("LoggingConfig.file_path is not set")

    path = Path(config.file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding='utf-8',
    )
    return _attach(handler, formatter, filters)


def build_handlers(
    config: LoggingConfig,
    formatter: logging.Formatter,
    filters: Sequence[logging.Filter] = (),
) -> List[logging.Handler]:
    """All handlers enabled by the config, console first."""
    handlers: List[logging.Handler] = []
    if config.enable_console:
        handlers.append(create_console_handler(formatter, filters))
    if config.enable_file:
        handlers.append(create_file_handler(config, formatter, filters))
    return handlers
