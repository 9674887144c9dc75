"""Replay error types"""

from typing import Optional


class ReplayError(Exception):
    """Base class for fixture store errors"""


class ValidationError(ReplayError):
    """A fixture blob is malformed (missing or invalid key, parm or value)"""

    def __init__(self, message: str, origin_name: Optional[str] = None):
        self.origin_name = origin_name
        if origin_name:
            message = f"{origin_name}: {message}"
        super().__init__(message)


class ResolutionError(ReplayError):
    """An externally stored value could not be read"""


class PersistenceError(ReplayError):
    """A fixture blob could not be written"""
