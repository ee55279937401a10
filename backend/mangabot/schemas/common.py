"""
MangaBot Backend - Shared Response Envelope Schemas
====================================================

What:  The uniform `{success, data?, message, error?}` wrapper every endpoint
       returns, plus the error and health response models.
How:   Resource schemas (schemas/manga.py, schemas/prestamo.py) subclass
       `Envelope` to add a typed `data` field. Envelope keys left as None
       (caller identity, payload) are dropped on output; null fields inside
       a record are always written.

Caller identity:
    Every successful envelope carries exactly one of user / createdBy /
    updatedBy / deletedBy / searchedBy with the authenticated subject.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_pascal

# Record ids are 32-bit integer columns
MAX_ID = 2**31 - 1


class PascalModel(BaseModel):
    """
    Base for record schemas whose JSON fields are PascalCase
    (`Id`, `Titulo`, `NombreCliente`, ...).

    Input accepts either the PascalCase alias or the attribute name;
    output always uses the alias. `from_attributes` lets services build
    schemas straight from ORM rows.
    """

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(BaseModel):
    """Successful response envelope without a payload (update / delete)."""

    success: bool = Field(default=True)
    message: str = Field(description="Human-readable outcome (Spanish)")
    user: Optional[str] = Field(default=None, description="Authenticated caller (reads)")
    created_by: Optional[str] = Field(default=None, alias="createdBy")
    updated_by: Optional[str] = Field(default=None, alias="updatedBy")
    deleted_by: Optional[str] = Field(default=None, alias="deletedBy")
    searched_by: Optional[str] = Field(default=None, alias="searchedBy")

    model_config = ConfigDict(populate_by_name=True)

    @model_serializer(mode="wrap")
    def drop_empty_keys(self, handler):
        # Top-level only: nested records keep their null fields
        return {key: value for key, value in handler(self).items() if value is not None}


class ErrorResponse(BaseModel):
    """
    What:  Failure envelope for every error status (400/401/404/422→400/500).

    Fields:
        success: Always false
        message: Human-readable description, never raw exception text
        error: Machine-readable error code (validation_error, not_found, ...)
        details: Optional extra context for validation failures
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "success": false,
            "message": "No se encontró el manga con ID 42",
            "error": "not_found",
            "request_id": "1f2e3d4c"
        }
    """

    success: bool = Field(default=False)
    message: str = Field(description="Human-readable error description")
    error: str = Field(description="Machine-readable error code")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
