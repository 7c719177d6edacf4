"""Keyset (cursor-based) pagination producing Relay-style connections."""

from keyset_connection.core.exceptions import (
    AppException,
    InvalidLimitError,
    InvalidSortError,
    MalformedCursorError,
    MissingLimitError,
    PaginationError,
)
from keyset_connection.core.pagination import (
    Connection,
    CursorCodec,
    CursorData,
    CursorPage,
    Edge,
    PageInfo,
    PaginationRequest,
    Paginator,
    SortDirection,
    paginate,
)
from keyset_connection.core.database.sources import (
    DataSource,
    InMemoryDataSource,
    SQLAlchemyDataSource,
)
from keyset_connection.core.settings import PaginationSettings, get_pagination_settings

__all__ = [
    "AppException",
    "Connection",
    "CursorCodec",
    "CursorData",
    "CursorPage",
    "DataSource",
    "Edge",
    "InMemoryDataSource",
    "InvalidLimitError",
    "InvalidSortError",
    "MalformedCursorError",
    "MissingLimitError",
    "PageInfo",
    "PaginationError",
    "PaginationRequest",
    "PaginationSettings",
    "Paginator",
    "SQLAlchemyDataSource",
    "SortDirection",
    "get_pagination_settings",
    "paginate",
]
