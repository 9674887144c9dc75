"""Logging utilities

Handlers are attached to the ``fixture_replay`` logger rather than the
root logger, so the test run's own logging setup is left alone.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "fixture_replay"

JSON_LINE_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", '
    '"logger": "%(name)s", "message": "%(message)s"}'
)


def _console_handler(log_format: str) -> logging.Handler:
    if log_format == "rich":
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        return handler

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(JSON_LINE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_format: str = "rich",
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Configure the package logger.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_format: Console format ('rich' or 'json')
        log_file: Optional file that also receives JSON lines

    Returns:
        The configured ``fixture_replay`` logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_console_handler(log_format))

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(JSON_LINE_FORMAT))
        logger.addHandler(file_handler)

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
