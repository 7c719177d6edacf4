"""Pydantic Settings v2 configuration.

Import settings via the cached loader:
    from keyset_connection.core.settings import get_pagination_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables (PAGINATION_ prefix)
    3. .env file (development only)
"""

from __future__ import annotations

from .loader import get_pagination_settings
from .pagination import PaginationSettings

__all__ = ["PaginationSettings", "get_pagination_settings"]
