"""Fixture Directory

Reads and writes fixture blobs in one replay directory.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from ..replay.config import ReplayConfig
from ..replay.errors import PersistenceError, ReplayError, ResolutionError
from ..utils.logging import get_logger
from .codec import BlobCodec

logger = get_logger(__name__)


class FixtureDirectory:
    """File access for one fixture directory"""

    def __init__(
        self,
        config: Optional[ReplayConfig] = None,
        codec: Optional[BlobCodec] = None,
        base_dir: Optional[Union[str, Path]] = None,
    ):
        """Initialize the fixture directory.

        Args:
            config: Naming settings (directory, prefix, suffixes)
            codec: Blob text codec
            base_dir: Directory override (default: config.directory)
        """
        self.config = config or ReplayConfig()
        self.codec = codec or BlobCodec()
        self.base_dir = Path(base_dir) if base_dir is not None else Path(self.config.directory)

    def get_blob_path(self, name: str) -> Path:
        return self.base_dir / name

    def list_key_blobs(self) -> list[str]:
        """List key blob names in load order.

        Returns:
            Sorted names starting with the prefix and ending with the key
            suffix and extension
        """
        if not self.base_dir.exists():
            logger.warning(f"Fixture directory not found: {self.base_dir}")
            return []

        ending = self.config.key_blob_ending
        return sorted(
            path.name
            for path in self.base_dir.iterdir()
            if path.is_file()
            and path.name.startswith(self.config.prefix)
            and path.name.endswith(ending)
        )

    def read_text(self, name: str) -> str:
        path = self.get_blob_path(name)
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise ResolutionError(f"Failed to read {path}: {e}") from e

    def read_blob(self, name: str) -> Any:
        """Read and parse a value blob.

        Raises:
            ResolutionError: File missing, unreadable or not valid JSON
        """
        text = self.read_text(name)
        try:
            return self.codec.parse(text)
        except ReplayError as e:
            raise ResolutionError(f"Failed to parse {name}: {e}") from e

    def read_key_blob(self, name: str) -> Any:
        """Read and decode a key blob (descriptors, registered matchers).

        Raises:
            ResolutionError: File missing or unreadable
            ValidationError: Invalid JSON or unknown matcher/resolver name
        """
        return self.codec.parse_key_blob(self.read_text(name))

    def write_text(self, name: str, text: str) -> Path:
        path = self.get_blob_path(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to write {path}: {e}") from e

        logger.debug(f"Saved fixture blob {path}")
        return path

    def write_blob(self, name: str, data: Any) -> Path:
        """Write a plain value blob.

        Raises:
            PersistenceError: Value not serializable or write failed
        """
        return self.write_text(name, self.codec.render(data))

    def write_key_blob(self, name: str, blob: dict) -> Path:
        """Write a key blob, encoding its descriptors.

        Raises:
            PersistenceError: Unnamed callable, unserializable value or
                write failure
        """
        return self.write_text(name, self.codec.render_key_blob(blob))

    def list_fixtures(self) -> list[dict]:
        """List every blob in the directory with file metadata.

        Returns:
            Fixture info dicts sorted by name
        """
        if not self.base_dir.exists():
            return []

        fixtures = []
        config = self.config
        for path in sorted(self.base_dir.glob(f"{config.prefix}*.{config.extension}")):
            if path.name.endswith(config.key_blob_ending):
                kind = "key"
            elif path.name.endswith(config.value_blob_ending):
                kind = "value"
            else:
                continue

            stat = path.stat()
            fixtures.append({
                "name": path.name,
                "kind": kind,
                "size_bytes": stat.st_size,
                "modified_at": datetime.fromtimestamp(stat.st_mtime).isoformat(),
            })

        return fixtures
