"""Logging helpers.

The library only emits records through standard ``logging`` loggers named
after their modules; handler and level configuration belong to the host
application.

Usage:
    from keyset_connection.infra.logging import get_lazy_logger

    logger = get_lazy_logger(__name__)
    logger.debug(lambda: f"Page summary: {summarize(page)}")  # Only runs if DEBUG enabled
"""

from keyset_connection.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = ["LazyLoggerAdapter", "get_lazy_logger"]
