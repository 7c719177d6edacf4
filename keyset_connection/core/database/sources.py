"""Data sources the paginator runs its queries against.

The paginator never touches storage itself. It hands a caller-supplied
query prefix to a ``DataSource`` twice: once to count every document the
prefix matches, and once with the range predicate, scan order, skip and
limit appended to fetch the page.

What a "query prefix" is depends on the source:

- ``SQLAlchemyDataSource``: a ``Select`` (``select(Article).where(...)``)
- ``InMemoryDataSource``: an optional ``document -> bool`` callable
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from functools import cmp_to_key
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from sqlalchemy import Select, func, select
from sqlalchemy import inspect as sa_inspect

from keyset_connection.core.exceptions import InvalidSortError
from keyset_connection.core.pagination.filters import (
    KeysetFilter,
    Predicate,
    compare_values,
    read_field,
)
from keyset_connection.core.pagination.sorting import SortDirection, SortSpec
from keyset_connection.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute


@runtime_checkable
class DataSource(Protocol):
    """Storage primitives the paginator needs.

    Attributes:
        supports_concurrent_queries: Whether ``count`` and ``fetch`` may be
            awaited at the same time
    """

    supports_concurrent_queries: bool

    async def count(self, query: Any) -> int:
        """Count documents matching the query prefix alone."""
        ...

    async def fetch(
        self,
        query: Any,
        *,
        predicate: Predicate,
        sort: SortSpec,
        skip: int,
        limit: int,
    ) -> list[Any]:
        """Return up to ``limit + 1`` documents in scan order.

        Documents match the query prefix and the predicate, are ordered by
        ``sort``, and the first ``skip`` of them are dropped.
        """
        ...


class SQLAlchemyDataSource:
    """Run pagination queries through an async SQLAlchemy session.

    An ``AsyncSession`` cannot execute two statements at once, so the
    count and page queries are awaited one after the other.

    Example:
        source = SQLAlchemyDataSource(session, Article)
        connection = await Paginator(source).paginate(
            select(Article).where(Article.published.is_(True)),
            PaginationRequest(first=20, sort={"created_at": -1}),
        )
    """

    supports_concurrent_queries = False

    def __init__(self, session: AsyncSession, model: type[Any]) -> None:
        self.session = session
        self.model = model
        self._lazy = get_lazy_logger(__name__, model=model.__name__)

    def resolve_column(self, field: str) -> InstrumentedAttribute[Any]:
        """Map a sort field name to the mapped column attribute."""
        if field not in sa_inspect(self.model).column_attrs:
            raise InvalidSortError(
                f"{self.model.__name__} has no sortable field '{field}'",
                extra={"field": field},
            )
        return getattr(self.model, field)

    async def count(self, query: Select[Any]) -> int:
        count_stmt = select(func.count()).select_from(query.order_by(None).subquery())
        total = (await self.session.execute(count_stmt)).scalar_one()
        self._lazy.debug(lambda: f"db.count: {self.model.__name__} -> {total}")
        return total

    async def fetch(
        self,
        query: Select[Any],
        *,
        predicate: Predicate,
        sort: SortSpec,
        skip: int,
        limit: int,
    ) -> list[Any]:
        statement = KeysetFilter(
            predicate,
            sort,
            resolve=self.resolve_column,
            limit=limit,
            skip=skip,
        ).apply(query)

        result = await self.session.execute(statement)
        rows = list(result.scalars().all())

        self._lazy.debug(
            lambda: f"db.fetch: {self.model.__name__}(limit={limit}, skip={skip}) -> {len(rows)} rows"
        )
        return rows


class InMemoryDataSource:
    """Paginate a list of documents (mappings or objects) held in memory.

    Matching, ordering and seeking follow the same rules as the SQL
    rendering, with ``None`` ordering before every other value.

    Example:
        source = InMemoryDataSource(documents)
        connection = await Paginator(source).paginate(
            lambda doc: doc["status"] == "open",
            PaginationRequest(first=10, sort={"priority": "desc"}),
        )
    """

    supports_concurrent_queries = True

    def __init__(self, documents: Iterable[Any]) -> None:
        self.documents = list(documents)

    def _matching(self, query: Callable[[Any], bool] | None) -> list[Any]:
        if query is None:
            return list(self.documents)
        return [document for document in self.documents if query(document)]

    async def count(self, query: Callable[[Any], bool] | None) -> int:
        return len(self._matching(query))

    async def fetch(
        self,
        query: Callable[[Any], bool] | None,
        *,
        predicate: Predicate,
        sort: SortSpec,
        skip: int,
        limit: int,
    ) -> list[Any]:
        candidates = [document for document in self._matching(query) if predicate.matches(document)]
        candidates.sort(key=cmp_to_key(_sort_comparator(sort)))
        return candidates[skip : skip + limit + 1]


def _sort_comparator(sort: SortSpec) -> Callable[[Any, Any], int]:
    def compare(left: Any, right: Any) -> int:
        for field, direction in sort.items():
            result = compare_values(read_field(left, field), read_field(right, field))
            if result:
                return result if direction == SortDirection.ASC else -result
        return 0

    return compare


__all__ = ["DataSource", "InMemoryDataSource", "SQLAlchemyDataSource"]
