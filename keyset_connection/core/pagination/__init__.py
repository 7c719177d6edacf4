"""Cursor-based (keyset) pagination with Relay connection results.

This package provides keyset pagination that is:
- Stable: results don't shift when data changes between pages
- Performant: uses indexed seeks instead of OFFSET scans
- Storage-agnostic: queries run through an injected data source

Usage:
    from keyset_connection.core.database.sources import SQLAlchemyDataSource
    from keyset_connection.core.pagination import PaginationRequest, Paginator

    paginator = Paginator(SQLAlchemyDataSource(session, Article))
    connection = await paginator.paginate(
        select(Article).where(Article.published.is_(True)),
        PaginationRequest(first=20, after=cursor, sort={"created_at": "desc"}),
    )
    return connection.model_dump(by_alias=True)

The cursor encodes the sort field values needed to seek to the next page.
Cursors are opaque URL-safe strings that clients pass back unchanged.
"""

from keyset_connection.core.pagination.cursor import CursorCodec, CursorData, extract_position
from keyset_connection.core.pagination.filters import (
    MATCH_ALL,
    AllOf,
    AnyOf,
    Comparison,
    KeysetFilter,
    Predicate,
    build_range_filter,
)
from keyset_connection.core.pagination.normalize import (
    NormalizedRequest,
    PaginationRequest,
    normalize_direction_params,
)
from keyset_connection.core.pagination.paginator import Paginator, paginate
from keyset_connection.core.pagination.schemas import (
    Connection,
    CursorPage,
    Edge,
    PageInfo,
)
from keyset_connection.core.pagination.sorting import (
    SortDirection,
    SortSpec,
    complete_sort,
    invert_sort,
    normalize_sort,
)

__all__ = [
    "MATCH_ALL",
    "AllOf",
    "AnyOf",
    "Comparison",
    "Connection",
    "CursorCodec",
    "CursorData",
    "CursorPage",
    "Edge",
    "KeysetFilter",
    "NormalizedRequest",
    "PageInfo",
    "PaginationRequest",
    "Paginator",
    "Predicate",
    "SortDirection",
    "SortSpec",
    "build_range_filter",
    "complete_sort",
    "extract_position",
    "invert_sort",
    "normalize_direction_params",
    "normalize_sort",
    "paginate",
]
