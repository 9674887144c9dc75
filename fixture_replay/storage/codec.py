"""Fixture blob text codec

Blobs are stored as pretty-printed JSON. Descriptors and predicate
patterns are written as small tagged mappings:

    {"data": <value>}          inline value
    {"file": "<blob name>"}    externally stored value
    {"func": "<name>"}         computed value (registered resolver)
    {"$matcher": "<name>"}     predicate pattern (registered matcher)

Only the top-level ``parm`` and ``value`` fields of a key blob are
interpreted this way; everything else is plain JSON data.
"""

import json
from typing import Any, Optional

from ..replay.descriptors import (
    CapabilityRegistry,
    Computed,
    ExternalReference,
    Inline,
    Predicate,
)
from ..replay.errors import PersistenceError, ValidationError

MATCHER_KEY = "$matcher"


class BlobCodec:
    """Render values to fixture text and parse them back"""

    def __init__(self, registry: Optional[CapabilityRegistry] = None, indent: int = 2):
        self.registry = registry or CapabilityRegistry()
        self.indent = indent

    # Text
    def render(self, data: Any) -> str:
        """Render a plain value as JSON text"""
        try:
            return json.dumps(data, indent=self.indent, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Value is not serializable: {e}") from e

    def parse(self, text: str) -> Any:
        """Parse JSON text into a plain value"""
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON: {e}") from e

    # Key blobs
    def render_key_blob(self, blob: dict) -> str:
        encoded = dict(blob)
        encoded["parm"] = self.encode_pattern(blob.get("parm"))
        encoded["value"] = self.encode_value(blob.get("value"))
        return self.render(encoded)

    def parse_key_blob(self, text: str) -> Any:
        blob = self.parse(text)
        if not isinstance(blob, dict):
            # Left for the store's validator to report
            return blob

        decoded = dict(blob)
        if "parm" in decoded:
            decoded["parm"] = self.decode_pattern(decoded["parm"])
        if "value" in decoded:
            decoded["value"] = self.decode_value(decoded["value"])
        return decoded

    # Patterns
    def encode_pattern(self, pattern: Any) -> Any:
        if isinstance(pattern, Predicate):
            if not pattern.name:
                raise PersistenceError("Cannot persist an unnamed predicate pattern")
            return {MATCHER_KEY: pattern.name}
        return pattern

    def decode_pattern(self, raw: Any) -> Any:
        if isinstance(raw, dict) and list(raw) == [MATCHER_KEY]:
            return self.registry.get_matcher(raw[MATCHER_KEY])
        return raw

    # Values
    def encode_value(self, value: Any) -> Any:
        if isinstance(value, Inline):
            return {"data": value.data}
        if isinstance(value, ExternalReference):
            return {"file": value.file}
        if isinstance(value, Computed):
            if not value.name:
                raise PersistenceError("Cannot persist an unnamed computed value")
            return {"func": value.name}
        return value

    def decode_value(self, raw: Any) -> Any:
        """Turn a tagged mapping into a descriptor.

        A mapping counts as a descriptor only when its sole key is one of
        ``data``, ``file`` or ``func``. Other values are returned as-is.
        """
        if not isinstance(raw, dict) or len(raw) != 1:
            return raw

        (tag, payload), = raw.items()
        if tag == "data":
            return Inline(payload)
        if tag == "file" and isinstance(payload, str):
            return ExternalReference(payload)
        if tag == "func" and isinstance(payload, str):
            return self.registry.get_resolver(payload)
        return raw
