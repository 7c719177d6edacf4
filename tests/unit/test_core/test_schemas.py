"""Unit tests for connection response schemas."""
from __future__ import annotations

from keyset_connection.core.pagination.schemas import Connection, CursorPage, Edge, PageInfo


def _connection() -> Connection:
    edges = [
        Edge(cursor="c1", node={"id": 1}),
        Edge(cursor="c2", node={"id": 2}),
    ]
    page_info = PageInfo(
        count=2,
        total_count=5,
        start_cursor="c1",
        end_cursor="c2",
        has_previous_page=True,
        has_next_page=True,
    )
    return Connection(edges=edges, page_info=page_info)


class TestPageInfo:
    """Tests for PageInfo schema."""

    def test_optional_fields_default(self):
        page_info = PageInfo(has_previous_page=False, has_next_page=False)

        assert page_info.start_cursor is None
        assert page_info.end_cursor is None
        assert page_info.count == 0
        assert page_info.total_count == 0

    def test_accepts_camel_case_input(self):
        page_info = PageInfo.model_validate(
            {"hasPreviousPage": True, "hasNextPage": False, "totalCount": 3}
        )

        assert page_info.has_previous_page is True
        assert page_info.total_count == 3


class TestConnection:
    """Tests for Connection schema."""

    def test_serializes_to_relay_shape(self):
        payload = _connection().model_dump(by_alias=True)

        assert payload == {
            "edges": [
                {"cursor": "c1", "node": {"id": 1}},
                {"cursor": "c2", "node": {"id": 2}},
            ],
            "pageInfo": {
                "count": 2,
                "totalCount": 5,
                "startCursor": "c1",
                "endCursor": "c2",
                "hasPreviousPage": True,
                "hasNextPage": True,
            },
        }

    def test_nodes(self):
        assert _connection().nodes == [{"id": 1}, {"id": 2}]

    def test_edges_hold_arbitrary_objects(self):
        class Item:
            def __init__(self, id: int):
                self.id = id

        connection = Connection(
            edges=[Edge(cursor="c", node=Item(id=9))],
            page_info=PageInfo(has_previous_page=False, has_next_page=False),
        )

        assert connection.edges[0].node.id == 9

    def test_to_cursor_page(self):
        page = _connection().to_cursor_page()

        assert isinstance(page, CursorPage)
        assert page.items == [{"id": 1}, {"id": 2}]
        assert page.next_cursor == "c2"
        assert page.prev_cursor == "c1"
        assert page.has_more is True
        assert page.total_count == 5

    def test_to_cursor_page_without_neighbours(self):
        connection = Connection(
            edges=[Edge(cursor="only", node={"id": 1})],
            page_info=PageInfo(
                count=1,
                total_count=1,
                start_cursor="only",
                end_cursor="only",
                has_previous_page=False,
                has_next_page=False,
            ),
        )

        page = connection.to_cursor_page()

        assert page.next_cursor is None
        assert page.prev_cursor is None
        assert page.has_more is False
