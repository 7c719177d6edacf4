"""Pagination settings.

Centralizes the page size policy and the tie-break column used to give
every sort a total order.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_LIMIT=50, PAGINATION_MAX_LIMIT=100
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        default_limit: Page size when neither ``first`` nor ``last`` is given.
        max_limit: Maximum allowed page size; larger requests are clamped.
        require_limit: Reject requests without ``first``/``last`` instead of
            falling back to ``default_limit``.
        tiebreak_field: Unique field appended to every sort order.
        concurrent_queries: Overlap the count and data queries when the data
            source can serve both at once.

    Example:
        settings = PaginationSettings(max_limit=500)
        paginator = Paginator(source, settings=settings)
    """

    default_limit: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Default page size when limit not specified",
    )
    max_limit: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum allowed page size (hard limit)",
    )
    require_limit: bool = Field(
        default=False,
        description="Raise MissingLimitError instead of using default_limit",
    )
    tiebreak_field: str = Field(
        default="id",
        min_length=1,
        description="Unique field appended to sort orders to guarantee a total order",
    )
    concurrent_queries: bool = Field(
        default=True,
        description="Run count and data queries concurrently when supported",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def check_default_within_max(self) -> PaginationSettings:
        if self.default_limit > self.max_limit:
            raise ValueError(
                f"default_limit ({self.default_limit}) exceeds max_limit ({self.max_limit})"
            )
        return self


__all__ = ["PaginationSettings"]
