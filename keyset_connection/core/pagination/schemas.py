"""Pagination response schemas.

This module provides two response styles over the same cursors:

1. Connection pattern (Relay specification):
   - Edges pairing each node with its cursor
   - PageInfo with navigation metadata and total count
   - Serializes to the camelCase shape GraphQL/Relay clients expect via
     ``model_dump(by_alias=True)``

2. Simple REST style (``CursorPage``):
   - Just items, next/previous cursors and a has_more flag

Example serialized connection:
    {
        "edges": [{"cursor": "eyJ2Ijp7...", "node": {...}}],
        "pageInfo": {
            "count": 1,
            "totalCount": 10,
            "startCursor": "eyJ2Ijp7...",
            "endCursor": "eyJ2Ijp7...",
            "hasPreviousPage": false,
            "hasNextPage": true
        }
    }
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

_RELAY_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PageInfo(BaseModel):
    """Pagination metadata following the Relay specification.

    Attributes:
        count: Number of edges in this page
        total_count: Documents matching the query, ignoring cursor, skip and limit
        start_cursor: Cursor of the first edge
        end_cursor: Cursor of the last edge
        has_previous_page: Whether items exist before this page
        has_next_page: Whether items exist after this page
    """

    model_config = _RELAY_CONFIG

    count: int = Field(default=0, ge=0, description="Number of edges returned")
    total_count: int = Field(default=0, ge=0, description="Total matching documents")
    start_cursor: str | None = Field(
        default=None,
        description="Cursor of the first item",
    )
    end_cursor: str | None = Field(
        default=None,
        description="Cursor of the last item",
    )
    has_previous_page: bool = Field(description="Whether previous items exist")
    has_next_page: bool = Field(description="Whether more items exist")


class Edge(BaseModel, Generic[T]):
    """A node paired with the cursor of its position."""

    model_config = _RELAY_CONFIG

    cursor: str = Field(description="Cursor for this item")
    node: T = Field(description="The data item")


class Connection(BaseModel, Generic[T]):
    """Relay connection: one page of edges plus navigation metadata.

    Client navigation:
        # First page
        first=10

        # Next page (end_cursor from previous response)
        first=10, after=<page_info.end_cursor>

        # Previous page (start_cursor from current response)
        last=10, before=<page_info.start_cursor>
    """

    model_config = _RELAY_CONFIG

    edges: list[Edge[T]] = Field(
        default_factory=list,
        description="List of edges (items with cursors)",
    )
    page_info: PageInfo = Field(description="Pagination metadata")

    @property
    def nodes(self) -> list[T]:
        """Get just the nodes without edge wrappers."""
        return [edge.node for edge in self.edges]

    def to_cursor_page(self) -> CursorPage[T]:
        """Convert to simple REST-style pagination."""
        return CursorPage(
            items=self.nodes,
            next_cursor=self.page_info.end_cursor if self.page_info.has_next_page else None,
            prev_cursor=self.page_info.start_cursor if self.page_info.has_previous_page else None,
            has_more=self.page_info.has_next_page,
            total_count=self.page_info.total_count,
        )


class CursorPage(BaseModel, Generic[T]):
    """Simple REST-style cursor pagination response.

    Attributes:
        items: List of data items
        next_cursor: Cursor for the next page (None if no more)
        prev_cursor: Cursor for the previous page (None if at start)
        has_more: Whether more items exist after this page
        total_count: Total matching documents
    """

    items: list[T] = Field(default_factory=list, description="List of items")
    next_cursor: str | None = Field(default=None, description="Cursor to fetch next page")
    prev_cursor: str | None = Field(default=None, description="Cursor to fetch previous page")
    has_more: bool = Field(default=False, description="Whether more items exist")
    total_count: int | None = Field(default=None, description="Total count")


__all__ = ["Connection", "CursorPage", "Edge", "PageInfo"]
