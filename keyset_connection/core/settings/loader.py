"""Cached settings loaders.

Settings are read from the environment once per process. Tests that
change the environment call ``get_pagination_settings.cache_clear()``.
"""

from __future__ import annotations

from functools import lru_cache

from .pagination import PaginationSettings


@lru_cache(maxsize=1)
def get_pagination_settings() -> PaginationSettings:
    """Get cached pagination settings.

    Returns:
        Validated and frozen PaginationSettings instance.
    """
    return PaginationSettings()


__all__ = ["get_pagination_settings"]
