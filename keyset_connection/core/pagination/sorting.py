"""Sort order handling for keyset pagination.

A sort order is an ordered mapping of field name to direction. Field
order defines tie-break precedence: the second field only decides
between documents equal on the first, and so on.

Keyset pagination needs a total order, otherwise documents that tie on
every sort field can be skipped or repeated between pages. ``complete_sort``
appends a unique field to guarantee one. ``invert_sort`` reverses an order
so "the last N before X" can be fetched as "the first N after X" and
reversed afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import IntEnum
from typing import Any

from keyset_connection.core.exceptions import InvalidSortError


class SortDirection(IntEnum):
    """Sort direction, numerically compatible with ``1``/``-1`` sort specs."""

    ASC = 1
    DESC = -1

    @classmethod
    def parse(cls, value: Any) -> SortDirection:
        """Parse ``1``/``-1`` or ``"asc"``/``"desc"`` (any case)."""
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in ("asc", "ascending"):
                return cls.ASC
            if lowered in ("desc", "descending"):
                return cls.DESC
        elif isinstance(value, int) and not isinstance(value, bool) and value in (1, -1):
            return cls(value)
        raise InvalidSortError(
            f"Invalid sort direction {value!r}; use 1, -1, 'asc' or 'desc'",
            extra={"direction": repr(value)},
        )

    def inverted(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


SortSpec = dict[str, SortDirection]

SortInput = Mapping[str, Any] | Iterable[tuple[str, Any]]


def normalize_sort(sort: SortInput | None) -> SortSpec:
    """Convert a caller sort specification to a ``SortSpec``.

    Args:
        sort: Mapping of field to direction, or sequence of ``(field, direction)``
            pairs. ``None`` means no caller ordering.

    Returns:
        Ordered field to ``SortDirection`` mapping

    Raises:
        InvalidSortError: If a field name is blank or a direction is unknown
    """
    if sort is None:
        return {}

    items = sort.items() if isinstance(sort, Mapping) else sort
    spec: SortSpec = {}
    for field, direction in items:
        if not isinstance(field, str) or not field:
            raise InvalidSortError(
                f"Sort field names must be non-empty strings, got {field!r}",
                extra={"field": repr(field)},
            )
        spec[field] = SortDirection.parse(direction)
    return spec


def complete_sort(sort: SortSpec, tiebreak_field: str) -> SortSpec:
    """Append the unique tie-break field ascending unless already present."""
    if tiebreak_field in sort:
        return dict(sort)
    return {**sort, tiebreak_field: SortDirection.ASC}


def invert_sort(sort: SortSpec) -> SortSpec:
    """Flip every field's direction, keeping field precedence unchanged.

    Example:
        invert_sort({"score": DESC, "id": ASC}) == {"score": ASC, "id": DESC}
    """
    return {field: direction.inverted() for field, direction in sort.items()}


__all__ = [
    "SortDirection",
    "SortInput",
    "SortSpec",
    "complete_sort",
    "invert_sort",
    "normalize_sort",
]
