"""
Notekeep Backend: Pydantic Request/Response Schemas
====================================================

What:  Pydantic models defining the API contract between client and server.
Why:   Input normalization, automatic serialization, and OpenAPI docs.
How:   All models use camelCase aliases on the wire (isPinned, createdAt) and
       also accept snake_case on input, so Python callers can use either.

Normalization happens here, before the service sees the data:
    - title is trimmed (emptiness is a business rule checked in NoteService)
    - tags are trimmed, lowercased, deduped (app.normalization.normalize_tags)
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from app.normalization import normalize_tags, normalize_title

API_MODEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
}


def _as_utc(value: Any) -> Any:
    # SQLite hands back naive datetimes; every timestamp we store is UTC
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /notes.

    title defaults to "" instead of being required so that a missing title
    reaches NoteService and is reported as a 400 validation_error, the same
    as a blank one.
    """
    title: str = Field(default="", description="Note title (required, trimmed)")
    content: str = Field(default="", description="Note body")
    tags: List[str] = Field(
        default_factory=list,
        description="Tags as a list or a comma-separated string",
    )
    is_pinned: bool = Field(default=False, description="Show above other notes")

    model_config = API_MODEL_CONFIG

    @field_validator("title", mode="before")
    @classmethod
    def _trim_title(cls, v: Any) -> Any:
        return normalize_title(v) if v is None or isinstance(v, str) else v

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, v: Any) -> Any:
        if v is None or isinstance(v, (str, list, tuple)):
            return normalize_tags(v)
        return v


class NoteUpdate(BaseModel):
    """
    Body of PATCH /notes/{id}.

    Only fields present in the request are merged onto the stored note.
    Unknown keys (e.g. a client echoing back id or createdAt) are ignored, so
    createdAt can never be overwritten.
    """
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    is_pinned: Optional[bool] = None
    is_archived: Optional[bool] = None
    is_deleted: Optional[bool] = None

    model_config = API_MODEL_CONFIG

    @field_validator("title", mode="before")
    @classmethod
    def _trim_title(cls, v: Any) -> Any:
        # None stays None: the field is simply not being changed
        return normalize_title(v) if isinstance(v, str) else v

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, v: Any) -> Any:
        if isinstance(v, (str, list, tuple)):
            return normalize_tags(v)
        return v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """Full representation of a stored note, returned by every /notes endpoint."""
    id: str = Field(description="Opaque note identifier")
    title: str
    content: str
    tags: List[str]
    is_pinned: bool
    is_archived: bool = False
    is_deleted: bool = False
    deleted_at: Optional[datetime] = Field(
        default=None,
        description="When the note was moved to trash (null if not trashed)",
    )
    created_at: datetime = Field(description="Creation time (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last modification time (UTC ISO 8601)")

    model_config = {**API_MODEL_CONFIG, "from_attributes": True}

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> str:
        return str(v)

    @field_validator("created_at", "updated_at", "deleted_at", mode="before")
    @classmethod
    def _ensure_utc(cls, v: Any) -> Any:
        return _as_utc(v)


class PurgeResponse(BaseModel):
    """Result of emptying the trash or running the reaper."""
    deleted: int = Field(description="Number of notes permanently removed")


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Please enter a title for your note",
            "details": {"field": "title"},
            "request_id": "1f3a9c2e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
