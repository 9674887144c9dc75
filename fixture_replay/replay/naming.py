"""Fixture file naming

Generated blobs are named ``{prefix}-{key ordinal}-{value ordinal}{suffix}.{ext}``
with zero-padded ordinals, e.g. ``e2e-00003-000012-key.json``. Names sort in
recording order. Ordinal 0 is never generated, so hand-written fixtures
named with zeros are never overwritten by the recorder.
"""

import re
from typing import Optional

from .config import ReplayConfig


def build_base_name(config: ReplayConfig, key_ordinal: int, value_ordinal: int) -> str:
    """Build the shared stem of a key/value blob pair"""
    if key_ordinal < 1 or value_ordinal < 1:
        raise ValueError(f"Generated ordinals start at 1: {key_ordinal}, {value_ordinal}")
    key_part = str(key_ordinal).zfill(config.key_ordinal_pad)
    value_part = str(value_ordinal).zfill(config.value_ordinal_pad)
    return f"{config.prefix}-{key_part}-{value_part}"


def key_blob_name(config: ReplayConfig, base_name: str) -> str:
    return f"{base_name}{config.key_blob_ending}"


def value_blob_name(config: ReplayConfig, base_name: str) -> str:
    return f"{base_name}{config.value_blob_ending}"


def parse_ordinals(config: ReplayConfig, filename: Optional[str]) -> Optional[tuple[int, int]]:
    """Extract ``(key_ordinal, value_ordinal)`` from a blob file name.

    Args:
        config: Naming settings
        filename: Blob file name (no directory)

    Returns:
        Ordinal pair, or None if the name does not follow the scheme
    """
    if not isinstance(filename, str) or not filename:
        return None

    pattern = (
        re.escape(config.prefix)
        + r"-(\d+)-(\d+)"
        + "(?:" + re.escape(config.key_suffix) + "|" + re.escape(config.value_suffix) + ")"
        + re.escape("." + config.extension)
    )
    match = re.fullmatch(pattern, filename)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))
