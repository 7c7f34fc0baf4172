"""Logging configuration and setup."""

import logging
import logging.handlers
from pathlib import Path
from typing import List

from ..config.models import LoggingConfig

# Chatty libraries kept at WARNING regardless of the configured level
QUIET_LOGGERS = ("aiohttp", "asyncio", "sqlalchemy")


def setup_logging(config: LoggingConfig) -> None:
    """Route all log records to the console and, optionally, a rotating file.

    Replaces any handlers already on the root logger.

    Args:
        config: Logging configuration.
    """
    level = getattr(logging, config.level)
    formatter = logging.Formatter(config.format)

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if config.file:
        handlers.append(_rotating_file_handler(config))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(f"Logging configured with level {config.level}")


def _rotating_file_handler(config: LoggingConfig) -> logging.Handler:
    log_path = Path(config.file)  # type: ignore[arg-type]
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=config.max_size_mb * 1024 * 1024,
        backupCount=config.backup_count,
        encoding="utf-8",
    )


class LoggerMixin:
    """Gives a class a ``logger`` named after its module and class."""

    @property
    def logger(self) -> logging.Logger:
        cls = self.__class__
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")
