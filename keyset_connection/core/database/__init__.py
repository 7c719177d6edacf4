"""Data source adapters for the paginator.

Sources live in ``keyset_connection.core.database.sources``; only the
statement filter base is imported here since the pagination filters
build on it.
"""

from keyset_connection.core.database.filters import StatementFilter

__all__ = ["StatementFilter"]
