"""Key blob validation"""

from typing import Any, Optional

import jsonschema

from .errors import ValidationError

KEY_BLOB_SCHEMA = {
    "type": "object",
    "required": ["key", "parm", "value"],
    "properties": {
        "key": {"type": "string", "minLength": 1},
        "parm": {"not": {"type": "null"}},
        "value": {"not": {"type": "null"}},
        "originName": {"type": ["string", "null"]},
    },
}


class BlobValidator:
    """JSON Schema validator for key blobs"""

    def __init__(self, schema: Optional[dict] = None):
        self.schema = schema or KEY_BLOB_SCHEMA
        self._validator = jsonschema.Draft7Validator(self.schema)

    def errors(self, blob: Any) -> list[str]:
        """Collect every schema violation in ``blob``.

        Args:
            blob: Parsed key blob

        Returns:
            Error messages (empty when valid)
        """
        errors = []
        found = self._validator.iter_errors(blob)
        for error in sorted(found, key=lambda e: [str(p) for p in e.path]):
            message = error.message
            if error.path:
                message += f" at {'.'.join(str(p) for p in error.path)}"
            errors.append(message)
        return errors

    def validate(self, blob: Any, origin_name: Optional[str] = None) -> None:
        """Raise ValidationError if ``blob`` is not a usable key blob"""
        errors = self.errors(blob)
        if errors:
            raise ValidationError(f"incorrect data: {'; '.join(errors)}", origin_name)
