"""Paginator: run a keyset-paginated query and assemble a Relay connection.

Steps for one call:
    1. Normalize first/after/last/before into limit, cursor, scan order, direction
    2. Build the range predicate from the scan order and cursor
    3. Count the query prefix and fetch ``limit + 1`` documents past the cursor
    4. Use the extra document only as a "more data exists" signal
    5. Reverse backward pages back into the caller's order
    6. Encode one cursor per document against the caller's sort order
    7. Derive page info

Page info flags follow a fixed rule. The overfetch probe only looks in
the scan direction, so the opposite flag reflects whether the caller
arrived with a cursor:

    forward:  has_next_page = has_more,    has_previous_page = bool(after)
    backward: has_next_page = bool(before), has_previous_page = has_more

A cursor whose document has since been deleted still counts as "arrived
with a cursor"; the flag is not re-probed.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any

from keyset_connection.core.database.sources import DataSource
from keyset_connection.core.pagination.cursor import CursorCodec
from keyset_connection.core.pagination.filters import build_range_filter
from keyset_connection.core.pagination.normalize import (
    NormalizedRequest,
    PaginationRequest,
    normalize_direction_params,
)
from keyset_connection.core.pagination.schemas import Connection, Edge, PageInfo
from keyset_connection.core.pagination.sorting import SortInput
from keyset_connection.core.settings import PaginationSettings, get_pagination_settings
from keyset_connection.infra.logging import get_lazy_logger

logger = get_lazy_logger(__name__)


class Paginator:
    """Keyset paginator over a data source.

    Example:
        paginator = Paginator(SQLAlchemyDataSource(session, Article))
        connection = await paginator.paginate(
            select(Article).where(Article.published.is_(True)),
            PaginationRequest(first=20, after=cursor, sort={"created_at": "desc"}),
        )

        for edge in connection.edges:
            print(edge.cursor, edge.node)
    """

    def __init__(
        self,
        source: DataSource,
        *,
        settings: PaginationSettings | None = None,
    ) -> None:
        self.source = source
        self.settings = settings or get_pagination_settings()

    async def paginate(self, query: Any, request: PaginationRequest) -> Connection[Any]:
        """Fetch one page.

        Args:
            query: Caller query prefix, passed to the data source unchanged
            request: Pagination arguments

        Returns:
            Connection with edges and page info

        Raises:
            MalformedCursorError: Cursor is undecodable or lacks a sort field
            MissingLimitError: No limit given and ``require_limit`` is set
            InvalidLimitError: Negative ``first``, ``last`` or ``skip``
            InvalidSortError: Sort specification is invalid
        """
        normalized = normalize_direction_params(request, self.settings)
        total_count, documents = await self._run_queries(query, normalized)

        has_more = len(documents) > normalized.limit
        page = documents[: normalized.limit]
        if normalized.is_backward:
            page.reverse()

        sort_fields = list(normalized.original_sort)
        edges = [
            Edge(cursor=CursorCodec.create_cursor(document, sort_fields), node=document)
            for document in page
        ]

        if normalized.is_backward:
            has_previous_page = has_more
            has_next_page = bool(request.before)
        else:
            has_previous_page = bool(request.after)
            has_next_page = has_more

        page_info = PageInfo(
            count=len(edges),
            total_count=total_count or 0,
            start_cursor=edges[0].cursor if edges else None,
            end_cursor=edges[-1].cursor if edges else None,
            has_previous_page=has_previous_page,
            has_next_page=has_next_page,
        )

        logger.debug(
            lambda: (
                f"paginate: {len(edges)} of {total_count} items, "
                f"has_next={has_next_page}, has_previous={has_previous_page}"
            )
        )

        return Connection(edges=edges, page_info=page_info)

    async def _run_queries(self, query: Any, normalized: NormalizedRequest) -> tuple[int, list[Any]]:
        predicate = build_range_filter(normalized.sort, normalized.cursor)

        def fetch() -> Coroutine[Any, Any, list[Any]]:
            return self.source.fetch(
                query,
                predicate=predicate,
                sort=normalized.sort,
                skip=normalized.skip,
                limit=normalized.limit,
            )

        if not (self.settings.concurrent_queries and self.source.supports_concurrent_queries):
            total_count = await self.source.count(query)
            documents = await fetch()
            return total_count, list(documents)

        # Failure or cancellation of either task cancels the other.
        try:
            async with asyncio.TaskGroup() as group:
                count_task = group.create_task(self.source.count(query))
                fetch_task = group.create_task(fetch())
        except ExceptionGroup as group_error:
            raise group_error.exceptions[0] from None

        return count_task.result(), list(fetch_task.result())


async def paginate(
    source: DataSource,
    query: Any,
    *,
    first: int | None = None,
    after: str | None = None,
    last: int | None = None,
    before: str | None = None,
    skip: int | None = None,
    sort: SortInput | None = None,
    settings: PaginationSettings | None = None,
) -> Connection[Any]:
    """Paginate ``query`` on ``source`` with Relay arguments.

    Shortcut for ``Paginator(source, settings=settings).paginate(query, PaginationRequest(...))``.
    """
    request = PaginationRequest(
        first=first,
        after=after,
        last=last,
        before=before,
        skip=skip,
        sort=sort,
    )
    return await Paginator(source, settings=settings).paginate(query, request)


__all__ = ["Paginator", "paginate"]
