"""Reduce Relay pagination arguments to one canonical request.

Callers page forward with ``first``/``after`` and backward with
``last``/``before``. Everything downstream only needs a limit, an
optional decoded cursor, the sort order to scan in, and whether the scan
runs backward.

Direction precedence:
    1. ``first`` given: forward, cursor from ``after``
    2. else ``last`` given: backward, cursor from ``before``
    3. else only ``before`` given: backward
    4. else forward

The cursor argument of the other direction is ignored. A backward scan
runs over the inverted sort so it can reuse the forward seek machinery;
the paginator reverses the fetched page afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from keyset_connection.core.exceptions import (
    InvalidLimitError,
    MalformedCursorError,
    MissingLimitError,
)
from keyset_connection.core.pagination.cursor import CursorCodec, CursorData
from keyset_connection.core.pagination.sorting import (
    SortInput,
    SortSpec,
    complete_sort,
    invert_sort,
    normalize_sort,
)
from keyset_connection.core.settings import PaginationSettings, get_pagination_settings
from keyset_connection.infra.logging import get_lazy_logger

logger = get_lazy_logger(__name__)


@dataclass(slots=True, frozen=True)
class PaginationRequest:
    """Caller-facing pagination arguments.

    Attributes:
        first: Page size for forward pagination
        after: Cursor to page forward from
        last: Page size for backward pagination
        before: Cursor to page backward from
        skip: Documents to skip after the cursor position
        sort: Caller sort order (field to direction)
    """

    first: int | None = None
    after: str | None = None
    last: int | None = None
    before: str | None = None
    skip: int | None = None
    sort: SortInput | None = field(default=None, hash=False)


@dataclass(slots=True, frozen=True)
class NormalizedRequest:
    """Canonical form of a pagination request.

    Attributes:
        limit: Page size
        cursor: Decoded seek position, or None for the first page
        sort: Sort order to scan in (inverted when backward)
        original_sort: Caller sort order completed with the tie-break field;
            edge cursors are always built against this order
        is_backward: Whether the scan runs backward
        skip: Documents to skip after the cursor position
    """

    limit: int
    cursor: CursorData | None
    sort: SortSpec
    original_sort: SortSpec
    is_backward: bool
    skip: int = 0


def resolve_direction(request: PaginationRequest) -> bool:
    """Return True when the request pages backward."""
    if request.first is not None:
        return False
    if request.last is not None:
        return True
    return bool(request.before) and not request.after


def normalize_direction_params(
    request: PaginationRequest,
    settings: PaginationSettings | None = None,
) -> NormalizedRequest:
    """Normalize pagination arguments.

    Args:
        request: Raw pagination arguments
        settings: Page size policy and tie-break field (cached settings if omitted)

    Returns:
        NormalizedRequest ready for building the range filter

    Raises:
        MissingLimitError: No ``first``/``last`` and ``require_limit`` is set
        InvalidLimitError: Negative ``first``, ``last`` or ``skip``
        MalformedCursorError: Cursor is undecodable or lacks a sort field
        InvalidSortError: Sort specification is invalid
    """
    settings = settings or get_pagination_settings()
    is_backward = resolve_direction(request)

    limit = _resolve_limit(request, is_backward, settings)

    skip = request.skip or 0
    if skip < 0:
        raise InvalidLimitError("skip", skip)

    original_sort = complete_sort(normalize_sort(request.sort), settings.tiebreak_field)
    sort = invert_sort(original_sort) if is_backward else original_sort

    raw_cursor = request.before if is_backward else request.after
    cursor = _decode_cursor(raw_cursor, original_sort) if raw_cursor else None

    logger.debug(
        lambda: (
            f"Normalized pagination: limit={limit} backward={is_backward} "
            f"cursor={'yes' if cursor else 'no'} skip={skip} "
            f"sort={[(name, int(d)) for name, d in sort.items()]}"
        )
    )

    return NormalizedRequest(
        limit=limit,
        cursor=cursor,
        sort=sort,
        original_sort=original_sort,
        is_backward=is_backward,
        skip=skip,
    )


def _resolve_limit(
    request: PaginationRequest,
    is_backward: bool,
    settings: PaginationSettings,
) -> int:
    argument = "last" if is_backward else "first"
    requested = request.last if is_backward else request.first

    if requested is None:
        if settings.require_limit:
            raise MissingLimitError()
        return settings.default_limit

    if requested < 0:
        raise InvalidLimitError(argument, requested)

    if requested > settings.max_limit:
        logger.warning(
            "Clamped '%s' from %s to max_limit %s",
            argument,
            requested,
            settings.max_limit,
        )
        return settings.max_limit

    return requested


def _decode_cursor(raw_cursor: str, sort: SortSpec) -> CursorData:
    try:
        cursor = CursorCodec.decode(raw_cursor)
    except MalformedCursorError as e:
        logger.warning("Rejected malformed cursor (length=%s): %s", len(raw_cursor), e.detail)
        raise

    missing = cursor.missing_fields(sort)
    if missing:
        logger.warning("Rejected cursor missing sort fields %s", missing)
        raise MalformedCursorError(
            f"Cursor does not match the sort order; missing fields: {', '.join(missing)}",
            extra={"missing_fields": missing},
        )
    return cursor


__all__ = [
    "NormalizedRequest",
    "PaginationRequest",
    "normalize_direction_params",
    "resolve_direction",
]
