"""
LeafNotes Backend — Shared Schema Building Blocks
===================================================

What:  The camelCase base model plus response shapes used by every router
       (acknowledgements, errors, health).
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from leafnotes.exceptions import NotFoundError


def resolve_id(raw: str, resource: str) -> UUID:
    """
    UUID for an id taken from a path or body.

    A string that is not a UUID cannot name any record, so it fails the same
    way an unknown id does: NotFoundError (404), never a 422.
    """
    try:
        return UUID(raw.strip())
    except ValueError:
        raise NotFoundError(resource=resource, resource_id=raw) from None


class CamelModel(BaseModel):
    """
    Base for all API models.

    Fields are declared in snake_case and exposed on the wire in camelCase;
    FastAPI serializes response models by alias.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(CamelModel):
    """Acknowledgement returned by delete and unshare operations."""
    success: bool = Field(default=True, description="Always true on success")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "note with ID '0b6c...' was not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(CamelModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
