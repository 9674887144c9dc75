"""Replay configuration

Settings come from keyword arguments, environment variables (``REPLAY_*``,
optionally from a ``.env`` file) or the ``replay:`` section of a YAML file.
"""

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from dotenv import load_dotenv

from ..utils.equality import parse_bool
from ..utils.logging import get_logger

logger = get_logger(__name__)

ENV_VARS = {
    "directory": "REPLAY_DIR",
    "prefix": "REPLAY_PREFIX",
    "key_suffix": "REPLAY_KEYSUFFIX",
    "value_suffix": "REPLAY_VALSUFFIX",
    "extension": "REPLAY_EXTENSION",
    "use_external_value_storage": "REPLAY_USE_VALUE_FILES",
    "write_live": "REPLAY_WRITE_LIVE",
    "key_ordinal_pad": "REPLAY_KEY_PAD",
    "value_ordinal_pad": "REPLAY_VALUE_PAD",
    "log_level": "REPLAY_LOG_LEVEL",
    "log_format": "REPLAY_LOG_FORMAT",
    "log_file": "REPLAY_LOG_FILE",
}


@dataclass(frozen=True)
class ReplayConfig:
    """Fixture store settings"""

    directory: str = "replay"
    prefix: str = "e2e"
    key_suffix: str = "-key"
    value_suffix: str = "-val"
    extension: str = "json"
    use_external_value_storage: bool = True
    write_live: bool = True
    key_ordinal_pad: int = 5
    value_ordinal_pad: int = 6
    log_level: Optional[str] = None
    log_format: str = "rich"
    log_file: Optional[str] = None

    def __post_init__(self):
        if not self.prefix:
            raise ValueError("prefix must not be empty")
        if self.key_ordinal_pad < 1 or self.value_ordinal_pad < 1:
            raise ValueError("ordinal pads must be at least 1 digit")

    @property
    def key_blob_ending(self) -> str:
        return f"{self.key_suffix}.{self.extension}"

    @property
    def value_blob_ending(self) -> str:
        return f"{self.value_suffix}.{self.extension}"

    def with_overrides(self, **overrides: Any) -> "ReplayConfig":
        return dataclasses.replace(self, **overrides)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "ReplayConfig":
        """Build a config from loosely typed values (env strings, YAML)"""
        defaults = cls()
        values: dict[str, Any] = {}

        for field in dataclasses.fields(cls):
            raw = data.get(field.name)
            if raw is None or raw == "":
                continue

            default = getattr(defaults, field.name)
            if isinstance(default, bool):
                values[field.name] = parse_bool(raw, default)
            elif isinstance(default, int):
                try:
                    values[field.name] = int(raw)
                except (TypeError, ValueError):
                    logger.warning(
                        f"Invalid {field.name}={raw!r}, fallback to {default}"
                    )
            else:
                values[field.name] = str(raw)

        return cls(**values)

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None, **overrides: Any) -> "ReplayConfig":
        """Load settings from ``REPLAY_*`` environment variables.

        Args:
            dotenv_path: Optional .env file (default: search upwards from cwd)
            **overrides: Explicit values that win over the environment

        Returns:
            ReplayConfig instance
        """
        load_dotenv(dotenv_path)
        data = {name: os.getenv(var) for name, var in ENV_VARS.items()}
        data.update(overrides)
        return cls.from_mapping(data)

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path], **overrides: Any) -> "ReplayConfig":
        """Load settings from the ``replay:`` section of a YAML file.

        Args:
            config_path: YAML file path
            **overrides: Explicit values that win over the file

        Returns:
            ReplayConfig instance (defaults if the file cannot be read)
        """
        data: dict[str, Any] = {}
        try:
            with open(config_path) as f:
                config = yaml.safe_load(f) or {}
            data = dict(config.get("replay") or {})
        except (OSError, yaml.YAMLError, AttributeError) as e:
            logger.warning(f"Failed to load config {config_path}: {e}")

        data.update(overrides)
        return cls.from_mapping(data)
