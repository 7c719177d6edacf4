"""Cursor encoding and decoding for pagination.

Cursors are opaque strings that encode the position of a document in a
result set: the value of every field of the active sort order, read from
that document. The next query seeks directly past that position.

The cursor format is:
1. JSON object ``{"v": {field: value}}`` with sorted keys
2. URL-safe base64 without padding, so it can be passed in query strings

Values JSON cannot represent natively are tagged so they decode to the
same Python type they were encoded from:

    datetime -> {"$dt": "2025-01-15T10:30:00+00:00"}
    date     -> {"$date": "2025-01-15"}
    UUID     -> {"$uuid": "550e8400-e29b-41d4-a716-446655440000"}
    Decimal  -> {"$dec": "12.50"}
    bytes    -> {"$b64": "AAEC"}

Example cursor payload:
    {"v":{"created_at":{"$dt":"2025-01-15T10:30:00+00:00"},"id":42}}
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from keyset_connection.core.exceptions import MalformedCursorError

_SCALARS = (str, int, float, bool, type(None))


class CursorData(BaseModel):
    """Decoded cursor: the position of one document under a sort order.

    Attributes:
        values: Mapping of sort field names to the document's values
    """

    values: dict[str, Any] = Field(description="Sort field values for seeking")

    model_config = {"frozen": True}

    def missing_fields(self, fields: Iterable[str]) -> list[str]:
        """Return the fields of a sort order this position has no value for."""
        return [field for field in fields if field not in self.values]


class CursorCodec:
    """Encode and decode pagination cursors.

    Usage:
        cursor = CursorCodec.encode(CursorData(
            values={"created_at": datetime.now(UTC), "id": 7}
        ))

        data = CursorCodec.decode(cursor)
        data.values["created_at"]  # datetime, not a string
    """

    @staticmethod
    def encode(data: CursorData) -> str:
        """Encode cursor data to an opaque string.

        Args:
            data: Cursor data with sort field values

        Returns:
            URL-safe base64 encoded string

        Raises:
            TypeError: If a value has a type the cursor format cannot carry
        """
        payload = {
            "v": {key: CursorCodec._serialize_value(value) for key, value in data.values.items()},
        }
        json_str = json.dumps(payload, separators=(",", ":"), sort_keys=True)
        return base64.urlsafe_b64encode(json_str.encode()).decode().rstrip("=")

    @staticmethod
    def decode(cursor: str) -> CursorData:
        """Decode a cursor string to cursor data.

        Args:
            cursor: URL-safe base64 encoded cursor string

        Returns:
            CursorData with sort field values

        Raises:
            MalformedCursorError: If cursor is not valid base64/JSON or has the wrong shape
        """
        if not isinstance(cursor, str) or not cursor:
            raise MalformedCursorError("Empty cursor provided")

        try:
            padded = cursor + "=" * (-len(cursor) % 4)
            json_str = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
            payload = json.loads(json_str)
        except (UnicodeError, binascii.Error, ValueError) as e:
            raise MalformedCursorError(f"Invalid cursor format: {e}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("v"), dict):
            raise MalformedCursorError("Cursor payload must be an object with a 'v' mapping")

        values = {
            key: CursorCodec._deserialize_value(key, value)
            for key, value in payload["v"].items()
        }
        return CursorData(values=values)

    @staticmethod
    def create_cursor(document: Any, sort_fields: Iterable[str]) -> str:
        """Create a cursor from a document.

        Args:
            document: Mapping (read by key) or object (read by attribute)
            sort_fields: Field names to capture, in sort order

        Returns:
            Encoded cursor string

        Example:
            cursor = CursorCodec.create_cursor(
                {"id": 3, "name": "c"},
                sort_fields=["name", "id"],
            )
        """
        return CursorCodec.encode(CursorData(values=extract_position(document, sort_fields)))

    @staticmethod
    def _serialize_value(value: Any) -> Any:
        # datetime before date: datetime is a date subclass
        if isinstance(value, datetime):
            return {"$dt": value.isoformat()}
        if isinstance(value, date):
            return {"$date": value.isoformat()}
        if isinstance(value, UUID):
            return {"$uuid": str(value)}
        if isinstance(value, Decimal):
            return {"$dec": str(value)}
        if isinstance(value, bytes):
            return {"$b64": base64.urlsafe_b64encode(value).decode()}
        if isinstance(value, _SCALARS):
            return value
        raise TypeError(f"Cannot encode cursor value of type {type(value).__name__}")

    @staticmethod
    def _deserialize_value(field: str, value: Any) -> Any:
        if isinstance(value, _SCALARS):
            return value
        if not isinstance(value, dict) or len(value) != 1:
            raise MalformedCursorError(
                f"Unsupported value for cursor field '{field}'",
                extra={"field": field},
            )

        ((tag, raw),) = value.items()
        try:
            if tag == "$dt":
                return datetime.fromisoformat(raw)
            if tag == "$date":
                return date.fromisoformat(raw)
            if tag == "$uuid":
                return UUID(raw)
            if tag == "$dec":
                return Decimal(raw)
            if tag == "$b64":
                return base64.urlsafe_b64decode(raw.encode("ascii"))
        except (TypeError, ValueError, AttributeError, InvalidOperation, binascii.Error) as e:
            raise MalformedCursorError(
                f"Invalid {tag} value for cursor field '{field}'",
                extra={"field": field},
            ) from e

        raise MalformedCursorError(
            f"Unknown value tag {tag!r} for cursor field '{field}'",
            extra={"field": field},
        )


def extract_position(document: Any, fields: Iterable[str]) -> dict[str, Any]:
    """Read the value of each sort field from a document.

    Mappings are read by key, anything else by attribute. A field the
    document lacks is recorded as ``None``.
    """
    if isinstance(document, Mapping):
        return {field: document.get(field) for field in fields}
    return {field: getattr(document, field, None) for field in fields}


__all__ = ["CursorCodec", "CursorData", "extract_position"]
