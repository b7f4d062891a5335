"""
Document model.

Serialized form:
    {"id": "...", "data": <any JSON>, "created_at": <unix s>, "updated_at": <unix s>}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from ..errors import CorruptDocumentError

_REQUIRED_KEYS = ("id", "data", "created_at", "updated_at")


@dataclass
class Document:
    """A stored JSON document.

    Attributes:
        id: Caller-assigned identifier, used as the storage key
        data: Arbitrary JSON value
        created_at: Creation time (unix seconds)
        updated_at: Last update time (unix seconds)
    """

    id: str
    data: Any
    created_at: int
    updated_at: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "data": self.data,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Document:
        """Create from dictionary.

        Raises:
            CorruptDocumentError: If keys are missing or hold invalid values
        """
        if not isinstance(data, dict):
            raise CorruptDocumentError("<unknown>", "expected a JSON object")
        doc_id = str(data.get("id", "<unknown>"))
        missing = [key for key in _REQUIRED_KEYS if key not in data]
        if missing:
            raise CorruptDocumentError(doc_id, f"missing keys {missing}")
        if not isinstance(data["id"], str):
            raise CorruptDocumentError(doc_id, "id must be a string")
        for key in ("created_at", "updated_at"):
            value = data[key]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise CorruptDocumentError(doc_id, f"{key} must be a non-negative integer")
        if data["updated_at"] < data["created_at"]:
            raise CorruptDocumentError(doc_id, "updated_at precedes created_at")
        return cls(
            id=data["id"],
            data=data["data"],
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str | bytes, doc_id: str = "<unknown>") -> Document:
        """Deserialize a stored document.

        Args:
            text: Serialized document
            doc_id: Id used in error messages

        Raises:
            CorruptDocumentError: If the payload is not a valid document
        """
        if isinstance(text, bytes):
            try:
                text = text.decode("utf-8")
            except UnicodeDecodeError as e:
                raise CorruptDocumentError(doc_id, f"not valid UTF-8: {e}") from e
        try:
            obj = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptDocumentError(doc_id, f"invalid JSON: {e}") from e
        return cls.from_dict(obj)
