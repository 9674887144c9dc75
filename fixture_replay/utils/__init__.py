"""Utility modules"""

from .equality import deep_equal, parse_bool
from .logging import get_logger, setup_logging

__all__ = [
    "deep_equal",
    "parse_bool",
    "get_logger",
    "setup_logging",
]
