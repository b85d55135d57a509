"""
LeafNotes Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the error scenarios of the notes API
       and its client.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the right status code.
Who:   Raised by services and by the API client; caught by global handlers
       or by the client state store.

Exception Hierarchy:
    LeafNotesError (base)            → 500 Internal Server Error
    ├── NotFoundError                → 404 Not Found
    ├── DatabaseError                → 500 Internal Server Error
    ├── ShareTokenCollisionError     → never leaves the share service
    └── ApiRequestError              → raised client-side for non-2xx responses
"""

from typing import Any, Dict, Optional


class LeafNotesError(Exception):
    """
    Base exception for all LeafNotes application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(LeafNotesError):
    """
    Raised when an id or share token does not resolve to a record.

    When:    GET /api/notes/{id} with an unknown id, GET /api/shared/{token}
             with an unknown or revoked token, or any mutation of a missing row.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing records; services convert that None
    into this exception so routes stay free of status-code logic.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
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
        self.resource = resource


class DatabaseError(LeafNotesError):
    """
    Raised when a database operation fails unexpectedly.

    When:    Connection lost mid-query, constraint violation, deadlock, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. SQL, constraint
    names and driver errors are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ShareTokenCollisionError(LeafNotesError):
    """
    A freshly generated share token hit the unique constraint.

    Raised inside ShareService and consumed by its retry loop; a collision
    that survives every attempt is converted into DatabaseError.
    """

    def __init__(self, note_id: Optional[str] = None):
        super().__init__(
            message="Generated share token already in use",
            context={"note_id": note_id} if note_id else None,
        )


class ApiRequestError(LeafNotesError):
    """
    Raised by the HTTP client when the API answers with a non-2xx status.

    Attributes:
        status_code: HTTP status of the failed response (0 for transport errors)
        error:       Machine-readable error code from the response body, if any
    """

    def __init__(
        self,
        status_code: int,
        message: str = "Something went wrong",
        error: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
        self.error = error
