"""
PlaceShare Backend — Custom Exception Hierarchy
=================================================

What:  The error signal every handler uses to report failure.
Why:   A not-found place, a rejected body and a broken database connection
       must all reach the client the same way: a message and a status code.
How:   Each exception class carries a message, an HTTP status code, a
       machine-readable error code and an optional context dict.
       One global handler (registered in main.py) turns any of them into
       a JSON error response.
Who:   Raised by services and routes; caught by the global handler.

Exception Hierarchy:
    PlaceShareError (base)       → 500
    ├── ValidationError          → 422 Unprocessable Entity
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class PlaceShareError(Exception):
    """
    Base exception for all PlaceShare application errors.

    Attributes:
        message:     User-facing error description (safe to return in API response)
        status_code: HTTP status the global handler responds with
        error_code:  Machine-readable error identifier for clients
        context:     Additional info (logged; only returned when `expose_context`)
    """

    status_code: int = 500
    error_code: str = "server_error"
    expose_context: bool = True

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PlaceShareError):
    """
    Raised when client input fails validation.

    HTTP: 422 Unprocessable Entity, matching what FastAPI returns for
    schema-level failures so clients see one status for bad input.
    """

    status_code = 422
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Invalid inputs passed, please check your data.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(PlaceShareError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records (not an exception).
    The service layer converts None → NotFoundError so the global
    handler can answer with 404.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        message: Optional[str] = None,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(PlaceShareError):
    """Raised when a write would violate a uniqueness rule (e.g. duplicate email)."""

    status_code = 409
    error_code = "conflict"

    def __init__(
        self,
        message: str = "Resource already exists.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(PlaceShareError):
    """
    Raised when a database lookup or write fails unexpectedly.

    When:    Connection lost mid-query, malformed identifier, failed commit.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        The original exception is kept in `context` for the server log
        and never rendered in the response body.
    """

    status_code = 500
    error_code = "server_error"
    expose_context = False

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
