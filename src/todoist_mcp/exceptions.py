"""
Todoist MCP Exception Hierarchy.

All errors raised by this package derive from TodoistError so that callers
can catch a single base class. Remote failures carry the HTTP status code
and response body of the Todoist API call that produced them.

Hierarchy:
    TodoistError
    ├── TodoistConfigurationError
    ├── TodoistValidationError
    ├── TodoistUnsupportedOperationError
    └── TodoistAPIError
        ├── TodoistAuthenticationError
        ├── TodoistNotFoundError
        └── TodoistRateLimitError
"""

from __future__ import annotations

from typing import Any


class TodoistError(Exception):
    """Base class for all Todoist MCP errors."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class TodoistConfigurationError(TodoistError):
    """Missing or malformed configuration (environment variables)."""


class TodoistValidationError(TodoistError):
    """Arguments are well-typed but describe an impossible request."""


class TodoistUnsupportedOperationError(TodoistError):
    """The remote API cannot perform the requested mutation."""

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        super().__init__(message, details={"operation": operation})
        self.operation = operation


class TodoistAPIError(TodoistError):
    """A call to the Todoist REST API failed."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_body: Any = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(
            message,
            details={"status_code": status_code, "endpoint": endpoint},
        )
        self.status_code = status_code
        self.response_body = response_body
        self.endpoint = endpoint


class TodoistAuthenticationError(TodoistAPIError):
    """The Todoist API rejected the configured token."""


class TodoistNotFoundError(TodoistAPIError):
    """The requested resource does not exist."""


class TodoistRateLimitError(TodoistAPIError):
    """Too many requests."""

    def __init__(self, message: str, *, retry_after: float | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.retry_after = retry_after
