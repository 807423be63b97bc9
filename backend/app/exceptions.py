"""
Notekeep: Custom Exception Hierarchy
=====================================

What:  Application-specific exceptions shared by the API server and the client.
Why:   Typed exceptions let callers react to a failure class (bad input, unknown
       note, unreachable server) instead of inspecting status codes or strings.
How:   Each exception carries a user-safe message and an optional context dict.
       On the server, global handlers in main.py turn them into JSON error
       bodies. On the client, app.client.api turns HTTP failures back into them.

Exception Hierarchy:
    NotekeepError (base)
    ├── ValidationError          → 400 Bad Request / inline form error
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── NetworkError             → client only: request failed or timed out
"""

from typing import Any, Dict, Optional


class NotekeepError(Exception):
    """
    Base exception for all Notekeep errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, only partially returned)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotekeepError):
    """
    Raised when note input fails a business rule.

    When:    Blank title on create or edit, over-long title/content on the
             client form.
    HTTP:    400 Bad Request

    Schema-level problems (wrong JSON types) are still reported by FastAPI as
    422; this exception covers the rules the note lifecycle owns.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(NotekeepError):
    """
    Raised when a note id does not match any stored record.

    HTTP:    404 Not Found
    Client:  Raised from get/update/delete so the caller can fall back to the
             list view.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class DatabaseError(NotekeepError):
    """
    Raised when a database operation fails unexpectedly.

    The API response always carries a generic message; the original error type
    goes into context and is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(NotekeepError):
    """Raised when a client exceeds the per-IP request rate limit (HTTP 429)."""

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class NetworkError(NotekeepError):
    """
    Raised by the client when the server cannot be reached.

    What:    Connection refused, DNS failure, timeout, or an unexpected 5xx.
    Reads:   NotesClient.load() falls back to the local cache.
    Writes:  Propagated to the caller; local state is left unchanged.
    """

    def __init__(
        self,
        message: str = "Could not reach the notes server",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
