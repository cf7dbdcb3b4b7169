"""
Showcase API: Request/Response Schemas
=========================================

What:  Pydantic models for the JSON envelopes the API returns.
How:   Handlers build these models; FastAPI serializes them by alias, so the
       wire format keeps the camelCase keys clients already use
       (insertedId, modifiedCount, deletedCount).

Envelope convention:
    Writes and contact:  {"success": true, ...result fields}
    Any failure:         {"success": false, "error": "<message>"}   (HTTP 200)
    List / get-by-id:    raw record(s), no envelope

Records themselves have no schema and are never modelled here.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Success Envelopes
# ══════════════════════════════════════════════════════════════════════════


class CreateResult(BaseModel):
    """Returned by POST /api/<collection>."""
    success: bool = True
    inserted_id: str = Field(
        serialization_alias="insertedId",
        description="Hex ObjectId of the new record",
    )


class UpdateResult(BaseModel):
    """Returned by PUT /api/<collection>/{id}. 0 when nothing changed or no match."""
    success: bool = True
    modified_count: int = Field(serialization_alias="modifiedCount", ge=0, le=1)


class DeleteResult(BaseModel):
    """Returned by DELETE /api/<collection>/{id}. 0 when the id matched nothing."""
    success: bool = True
    deleted_count: int = Field(serialization_alias="deletedCount", ge=0, le=1)


class ContactResult(BaseModel):
    success: bool = True
    message: str = "Email Sent Successfully"


# ══════════════════════════════════════════════════════════════════════════
# Failure Envelope
# ══════════════════════════════════════════════════════════════════════════


class Failure(BaseModel):
    """
    What:  Body of every failed request, always sent with HTTP 200.
    How:   `error` is the text of the exception caught at the handler boundary.

    Example:
        {
            "success": false,
            "error": "'abc' is not a valid ObjectId, it must be a 12-byte input or a 24-character hex string"
        }
    """
    success: bool = False
    error: str = Field(description="Underlying error message")

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Failure":
        return cls(error=str(exc) or type(exc).__name__)


# ══════════════════════════════════════════════════════════════════════════
# Request Bodies
# ══════════════════════════════════════════════════════════════════════════


class ContactSubmission(BaseModel):
    """
    Body of POST /api/contact. Nothing is validated: values of any JSON type
    are rendered into the message as text, missing ones as empty text, and a
    bad address is left for the relay to reject.
    """
    name: Optional[Any] = None
    email: Optional[Any] = None
    message: Optional[Any] = None


class HealthResponse(BaseModel):
    """Health check response showing service and store status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
