"""Range predicates for keyset pagination.

The seek method replaces OFFSET scans with a WHERE condition that starts
right after the cursor position. For a sort over fields (f1, ..., fn)
and cursor values (v1, ..., vn) the condition is:

    (f1 op1 v1) OR
    (f1 = v1 AND f2 op2 v2) OR
    ...
    (f1 = v1 AND ... AND f(n-1) = v(n-1) AND fn opn vn)

where ``op`` is ``>`` for ascending fields and ``<`` for descending ones.
Because the scan order is already inverted for backward pagination, the
same condition yields "before" semantics there.

The predicate is built as a small storage-agnostic tree and rendered per
backend: ``matches()`` evaluates it against in-memory documents and
``to_sqlalchemy()`` turns it into a SQLAlchemy clause.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import Select, and_, or_, true

from keyset_connection.core.database.filters import StatementFilter
from keyset_connection.core.pagination.sorting import SortDirection, SortSpec

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement

    from keyset_connection.core.pagination.cursor import CursorData

ColumnResolver = Callable[[str], Any]

Operator = Literal["eq", "gt", "lt"]


def read_field(document: Any, field: str) -> Any:
    """Read a field from a mapping or an object."""
    if isinstance(document, Mapping):
        return document.get(field)
    return getattr(document, field, None)


def compare_values(left: Any, right: Any) -> int:
    """Three-way comparison where ``None`` orders before every other value."""
    if left is None or right is None:
        return (left is not None) - (right is not None)
    if left == right:
        return 0
    return -1 if left < right else 1


class Predicate:
    """Base class for range predicate nodes."""

    def matches(self, document: Any) -> bool:
        raise NotImplementedError

    def to_sqlalchemy(self, resolve: ColumnResolver) -> ColumnElement[bool]:
        raise NotImplementedError


class _MatchAll(Predicate):
    """Universal predicate used when no cursor is given."""

    def matches(self, document: Any) -> bool:
        return True

    def to_sqlalchemy(self, resolve: ColumnResolver) -> ColumnElement[bool]:
        return true()

    def __repr__(self) -> str:
        return "MATCH_ALL"


MATCH_ALL = _MatchAll()


@dataclass(frozen=True, slots=True)
class Comparison(Predicate):
    """``field op value``."""

    field: str
    op: Operator
    value: Any

    def matches(self, document: Any) -> bool:
        result = compare_values(read_field(document, self.field), self.value)
        if self.op == "eq":
            return result == 0
        if self.op == "gt":
            return result > 0
        return result < 0

    def to_sqlalchemy(self, resolve: ColumnResolver) -> ColumnElement[bool]:
        column = resolve(self.field)
        if self.op == "eq":
            return column == self.value
        if self.op == "gt":
            return column > self.value
        return column < self.value


@dataclass(frozen=True, slots=True)
class AllOf(Predicate):
    """Conjunction of clauses."""

    clauses: tuple[Predicate, ...]

    def matches(self, document: Any) -> bool:
        return all(clause.matches(document) for clause in self.clauses)

    def to_sqlalchemy(self, resolve: ColumnResolver) -> ColumnElement[bool]:
        return and_(*(clause.to_sqlalchemy(resolve) for clause in self.clauses))


@dataclass(frozen=True, slots=True)
class AnyOf(Predicate):
    """Disjunction of clauses."""

    clauses: tuple[Predicate, ...]

    def matches(self, document: Any) -> bool:
        return any(clause.matches(document) for clause in self.clauses)

    def to_sqlalchemy(self, resolve: ColumnResolver) -> ColumnElement[bool]:
        return or_(*(clause.to_sqlalchemy(resolve) for clause in self.clauses))


def build_range_filter(sort: SortSpec, cursor: CursorData | None) -> Predicate:
    """Build the predicate selecting documents strictly after a cursor position.

    Args:
        sort: Active scan order (already inverted for backward pagination)
        cursor: Decoded cursor position, or None for the first page

    Returns:
        ``MATCH_ALL`` without a cursor, otherwise the lexicographic seek predicate

    Raises:
        ValueError: If the sort order is empty
    """
    if cursor is None:
        return MATCH_ALL
    if not sort:
        raise ValueError("Keyset pagination requires at least one sort field")

    values = cursor.values
    fields = list(sort.items())
    branches: list[Predicate] = []

    for i, (field, direction) in enumerate(fields):
        op: Operator = "gt" if direction == SortDirection.ASC else "lt"
        compare = Comparison(field, op, values[field])

        equalities = tuple(Comparison(prev, "eq", values[prev]) for prev, _ in fields[:i])
        branches.append(AllOf((*equalities, compare)) if equalities else compare)

    return AnyOf(tuple(branches))


class KeysetFilter(StatementFilter):
    """Apply keyset pagination to a SQLAlchemy query.

    Adds:
    1. WHERE clause to seek past the cursor (unless the predicate is MATCH_ALL)
    2. ORDER BY clause for the scan order
    3. OFFSET for ``skip``
    4. LIMIT of ``limit + 1`` so the caller can tell whether more rows exist

    Example:
        stmt = KeysetFilter(
            predicate=build_range_filter(sort, cursor),
            sort={"created_at": SortDirection.DESC, "id": SortDirection.ASC},
            resolve=lambda name: getattr(Article, name),
            limit=20,
        ).apply(select(Article))
    """

    def __init__(
        self,
        predicate: Predicate,
        sort: SortSpec,
        *,
        resolve: ColumnResolver,
        limit: int,
        skip: int = 0,
    ) -> None:
        self.predicate = predicate
        self.sort = sort
        self.resolve = resolve
        self.limit = limit
        self.skip = skip

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if self.predicate is not MATCH_ALL:
            statement = statement.where(self.predicate.to_sqlalchemy(self.resolve))

        statement = statement.order_by(None).order_by(*self._order_clauses())

        if self.skip:
            statement = statement.offset(self.skip)

        return statement.limit(self.limit + 1)

    def _order_clauses(self) -> Sequence[Any]:
        clauses = []
        for field, direction in self.sort.items():
            column = self.resolve(field)
            clauses.append(column.asc() if direction == SortDirection.ASC else column.desc())
        return clauses


__all__ = [
    "MATCH_ALL",
    "AllOf",
    "AnyOf",
    "ColumnResolver",
    "Comparison",
    "KeysetFilter",
    "Predicate",
    "build_range_filter",
    "compare_values",
    "read_field",
]
