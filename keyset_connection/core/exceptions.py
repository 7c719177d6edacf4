"""Custom exception classes for the pagination core."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base library exception.

    Follows RFC 7807 Problem Details so a web host can turn any error
    raised here into a problem response without inspecting its type.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence of the problem.
        extra: Additional context-specific information about the error.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        titles = {
            400: "Bad Request",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
        }
        return titles.get(status_code, "Error")

    def to_problem_details(self) -> dict[str, Any]:
        """Render the error as an RFC 7807 problem details body."""
        body: dict[str, Any] = {
            "type": self.type,
            "title": self.title,
            "status": self.status_code,
            "detail": self.detail,
        }
        if self.instance:
            body["instance"] = self.instance
        body.update(self.extra)
        return body


class PaginationError(AppException):
    """Base class for invalid pagination input supplied by the caller."""

    def __init__(
        self,
        detail: str,
        type: str = "invalid-pagination",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=400,
            detail=detail,
            type=type,
            title="Bad Request",
            instance=instance,
            extra=extra,
        )


class MalformedCursorError(PaginationError):
    """Raised when a cursor cannot be decoded or does not fit the sort order.

    Example:
        raise MalformedCursorError(
            detail="Cursor is missing sort field 'created_at'",
            extra={"missing_fields": ["created_at"]},
        )
    """

    def __init__(
        self,
        detail: str = "Invalid cursor",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            detail=detail,
            type="invalid-cursor",
            instance=instance,
            extra=extra,
        )


class MissingLimitError(PaginationError):
    """Raised when neither ``first`` nor ``last`` is given and a limit is required."""

    def __init__(
        self,
        detail: str = "One of 'first' or 'last' must be provided",
        instance: str | None = None,
    ) -> None:
        super().__init__(detail=detail, type="missing-limit", instance=instance)


class InvalidLimitError(PaginationError):
    """Raised for negative ``first``, ``last`` or ``skip`` values."""

    def __init__(self, argument: str, value: int, instance: str | None = None) -> None:
        super().__init__(
            detail=f"'{argument}' must be a non-negative integer, got {value}",
            type="invalid-limit",
            instance=instance,
            extra={"argument": argument, "value": value},
        )


class InvalidSortError(PaginationError):
    """Raised when a sort specification holds an unknown direction or blank field."""

    def __init__(
        self,
        detail: str,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            detail=detail,
            type="invalid-sort",
            instance=instance,
            extra=extra,
        )


__all__ = [
    "AppException",
    "InvalidLimitError",
    "InvalidSortError",
    "MalformedCursorError",
    "MissingLimitError",
    "PaginationError",
]
