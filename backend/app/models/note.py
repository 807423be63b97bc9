"""
Notekeep Backend: Note SQLAlchemy Model
========================================

What:  ORM model representing the `notes` table.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design Rationale:
    - UUID primary key: opaque to clients, assigned by the store at creation
    - title: unbounded Text; the 100-character limit belongs to the client form
    - tags: JSON array (JSONB on PostgreSQL) keeping insertion order for display
    - is_archived / is_deleted: soft-delete flags; the record stays until the
      trash is emptied, the reaper runs, or DELETE /notes/{id} is called
    - deleted_at: when the note entered the trash; the reaper compares it
      against TRASH_RETENTION_DAYS
    - created_at / updated_at: UTC with timezone, never naive

Index on created_at:
    GET /notes returns everything in insertion order, which is created_at ASC.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, Boolean, DateTime, Index, Text, Uuid, false
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

# JSONB where available, plain JSON (text) elsewhere
TagList = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Note(Base):
    """
    A single user-authored note.

    Lifecycle:
        1. Created by POST /notes (id and both timestamps assigned together)
        2. Mutated in place by PATCH /notes/{id}; updated_at bumped every time
        3. Optionally archived (is_archived) or moved to trash (is_deleted)
        4. Removed permanently by DELETE, empty trash, or the trash reaper
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    tags: Mapped[List[str]] = mapped_column(TagList, nullable=False, default=list)

    is_pinned: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(),
    )
    is_archived: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(),
    )
    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(),
    )

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )

    __table_args__ = (
        Index("idx_notes_created_at", "created_at"),
        Index("idx_notes_trash", "is_deleted", "deleted_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, title={self.title!r}, "
            f"pinned={self.is_pinned}, deleted={self.is_deleted})>"
        )
