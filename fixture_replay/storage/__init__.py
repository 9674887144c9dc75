"""Fixture blob storage"""

from .codec import BlobCodec
from .fixture_files import FixtureDirectory

__all__ = ["BlobCodec", "FixtureDirectory"]
