"""Integration tests: keyset pagination against SQLite through SQLAlchemy."""
from __future__ import annotations

import pytest
from sqlalchemy import select

from keyset_connection.core.database.sources import SQLAlchemyDataSource
from keyset_connection.core.exceptions import InvalidSortError
from keyset_connection.core.pagination.filters import MATCH_ALL
from keyset_connection.core.pagination.normalize import PaginationRequest
from keyset_connection.core.pagination.paginator import Paginator
from tests.fixtures.models import Article

SCORE_DESC_ORDER = [2, 5, 8, 1, 4, 7, 10, 3, 6, 9]


@pytest.fixture
def source(db_session) -> SQLAlchemyDataSource:
    return SQLAlchemyDataSource(db_session, Article)


@pytest.fixture
def paginator(source, settings) -> Paginator:
    return Paginator(source, settings=settings)


def article_ids(connection) -> list[int]:
    return [edge.node.id for edge in connection.edges]


class TestSQLAlchemyDataSource:
    """Direct data source calls."""

    async def test_count_ignores_ordering(self, source, articles):
        assert await source.count(select(Article).order_by(Article.title)) == 10

    async def test_count_respects_prefix_filter(self, source, articles):
        assert await source.count(select(Article).where(Article.author == "alice")) == 5

    async def test_fetch_overfetches_by_one(self, source, articles):
        rows = await source.fetch(
            select(Article),
            predicate=MATCH_ALL,
            sort={"id": 1},
            skip=0,
            limit=3,
        )

        assert [row.id for row in rows] == [1, 2, 3, 4]

    @pytest.mark.parametrize("field", ["nope", "metadata", "registry", "__repr__", "__tablename__"])
    async def test_non_column_sort_field_rejected(self, source, field):
        with pytest.raises(InvalidSortError) as exc_info:
            source.resolve_column(field)

        assert exc_info.value.extra == {"field": field}

    async def test_mapped_column_resolved(self, source):
        assert source.resolve_column("score") is Article.score

    async def test_reports_sequential_queries(self, source):
        assert source.supports_concurrent_queries is False


class TestPagination:
    """End-to-end pagination over persisted rows."""

    async def test_forward_traversal_with_ties(self, paginator, articles):
        seen: list[int] = []
        after = None
        while True:
            connection = await paginator.paginate(
                select(Article),
                PaginationRequest(first=3, after=after, sort={"score": "desc"}),
            )
            seen.extend(article_ids(connection))
            if not connection.page_info.has_next_page:
                break
            after = connection.page_info.end_cursor

        assert seen == SCORE_DESC_ORDER

    async def test_backward_page_before_cursor(self, paginator, articles):
        forward = await paginator.paginate(
            select(Article), PaginationRequest(first=10, sort={"score": "desc"})
        )
        before = forward.edges[6].cursor

        backward = await paginator.paginate(
            select(Article), PaginationRequest(last=4, before=before, sort={"score": "desc"})
        )

        assert article_ids(backward) == SCORE_DESC_ORDER[2:6]
        assert backward.page_info.has_previous_page is True
        assert backward.page_info.has_next_page is True
        assert backward.edges[0].cursor == forward.edges[2].cursor

    async def test_datetime_sort_roundtrips_through_cursor(self, paginator, articles):
        sort = {"published_at": -1}
        first_page = await paginator.paginate(select(Article), PaginationRequest(first=3, sort=sort))
        second_page = await paginator.paginate(
            select(Article),
            PaginationRequest(first=3, after=first_page.page_info.end_cursor, sort=sort),
        )

        assert article_ids(first_page) == [10, 8, 9]
        assert article_ids(second_page) == [6, 7, 4]

    async def test_prefix_filter_skip_and_total_count(self, paginator, articles):
        connection = await paginator.paginate(
            select(Article).where(Article.author == "alice"),
            PaginationRequest(first=1, skip=2),
        )

        assert article_ids(connection) == [5]
        assert connection.page_info.total_count == 5
        assert connection.page_info.has_next_page is True

    async def test_empty_table(self, paginator, db_session):
        connection = await paginator.paginate(select(Article), PaginationRequest(first=5))

        assert connection.edges == []
        assert connection.page_info.total_count == 0
        assert connection.page_info.start_cursor is None
        assert connection.page_info.has_next_page is False

    async def test_sort_on_model_metadata_is_caller_error(self, paginator, articles):
        with pytest.raises(InvalidSortError) as exc_info:
            await paginator.paginate(select(Article), PaginationRequest(first=2, sort={"metadata": 1}))

        assert exc_info.value.status_code == 400
        assert exc_info.value.type == "invalid-sort"
