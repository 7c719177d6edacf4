"""Statement filter base for SQLAlchemy queries.

Filters work directly with SQLAlchemy statements without hiding the
query: each one takes a ``Select`` and returns a modified ``Select``.

Usage:
    stmt = select(Article).where(Article.published.is_(True))
    stmt = KeysetFilter(predicate, sort, resolve=resolver, limit=20).apply(stmt)
    result = await session.execute(stmt)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy import Select


class StatementFilter(ABC):
    """Base class for statement filters.

    All filters implement `apply()` which modifies a SQLAlchemy statement.
    """

    @abstractmethod
    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply filter to statement.

        Args:
            statement: SQLAlchemy select statement

        Returns:
            Modified select statement
        """
        ...


__all__ = ["StatementFilter"]
