"""
Notekeep Backend: Note Service (Store Operations)
==================================================

What:  The note store: create, list, get, update, delete, plus trash handling.
Why:   Keeps the note lifecycle rules out of the HTTP layer.
How:   Stateless methods receiving an AsyncSession per call. Each mutation
       commits before returning, so a 2xx response always describes a
       durable write. get_db_session rolls back if anything raises.

Lifecycle rules enforced here:
    - title must be non-empty after trimming (ValidationError → 400)
    - id, created_at and updated_at are assigned together at creation,
      from a single clock reading, so created_at == updated_at
    - every update bumps updated_at strictly past its previous value, even
      when the clock has not advanced (1µs nudge); created_at never changes
    - moving a note to trash stamps deleted_at; restoring clears it
    - delete is permanent; trashed notes are also removed by empty_trash()
      and by purge_expired_trash() (the reaper)

Concurrency:
    Last write wins. There is no version column; two simultaneous PATCHes to
    the same note both succeed and the later commit overwrites the earlier.
"""

import logging
import uuid
from datetime import timedelta
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError, ValidationError
from app.models.note import Note, as_utc, utcnow
from app.schemas.note import NoteCreate, NoteResponse, NoteUpdate

logger = logging.getLogger(__name__)


def _parse_id(note_id: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(note_id))
    except ValueError:
        return None


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        NotFoundError and ValidationError propagate unchanged. SQLAlchemy
        failures are wrapped in DatabaseError so the API never leaks SQL or
        schema details.
    """

    # ── Create ────────────────────────────────────────────────────────────

    async def create_note(self, db: AsyncSession, data: NoteCreate) -> NoteResponse:
        """
        Create and persist a new note.

        Raises:
            ValidationError: title missing or blank after trimming (→ 400)
            DatabaseError: insert failed (→ 500)
        """
        if not data.title:
            raise ValidationError(
                message="Please enter a title for your note",
                field="title",
            )

        now = utcnow()
        note = Note(
            id=uuid.uuid4(),
            title=data.title,
            content=data.content,
            tags=list(data.tags),
            is_pinned=data.is_pinned,
            is_archived=False,
            is_deleted=False,
            created_at=now,
            updated_at=now,
        )

        try:
            db.add(note)
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the note. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Note created: %s (%d tags)", note.id, len(note.tags))
        return NoteResponse.model_validate(note)

    # ── Read ──────────────────────────────────────────────────────────────

    async def list_notes(self, db: AsyncSession) -> List[NoteResponse]:
        """
        Return every stored note in insertion order.

        No filtering and no pagination: archived and trashed notes are included
        and the client derives its views locally.
        """
        try:
            result = await db.execute(select(Note).order_by(Note.created_at))
            notes = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [NoteResponse.model_validate(note) for note in notes]

    async def get_note(self, db: AsyncSession, note_id: str) -> NoteResponse:
        """
        Retrieve a single note.

        Raises:
            NotFoundError: no note with this id (also for malformed ids)
        """
        note = await self._load(db, note_id)
        return NoteResponse.model_validate(note)

    # ── Update ────────────────────────────────────────────────────────────

    async def update_note(
        self, db: AsyncSession, note_id: str, data: NoteUpdate
    ) -> NoteResponse:
        """
        Merge the provided fields onto an existing note.

        Fields absent from the request (or sent as null) are left untouched.
        updated_at is refreshed even when nothing else changed.

        Raises:
            NotFoundError: unknown id (→ 404)
            ValidationError: title explicitly set to blank (→ 400)
        """
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "title" in changes and not changes["title"]:
            raise ValidationError(
                message="Note title cannot be empty",
                field="title",
            )

        note = await self._load(db, note_id)

        now = utcnow()
        previous = as_utc(note.updated_at)
        if now <= previous:
            now = previous + timedelta(microseconds=1)

        if "is_deleted" in changes and changes["is_deleted"] != note.is_deleted:
            note.deleted_at = now if changes["is_deleted"] else None

        for field, value in changes.items():
            setattr(note, field, list(value) if field == "tags" else value)
        note.updated_at = now

        try:
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the note. Please try again.",
                context={"note_id": str(note_id)},
            )

        logger.info("Note %s updated (%s)", note.id, ", ".join(sorted(changes)) or "touch")
        return NoteResponse.model_validate(note)

    # ── Delete ────────────────────────────────────────────────────────────

    async def delete_note(self, db: AsyncSession, note_id: str) -> bool:
        """Permanently remove a note. Raises NotFoundError for unknown ids."""
        note = await self._load(db, note_id)
        try:
            await db.delete(note)
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": str(note_id)},
            )
        logger.info("Note %s deleted permanently", note_id)
        return True

    async def empty_trash(self, db: AsyncSession) -> int:
        """Permanently remove every note currently in the trash."""
        return await self._purge(db, Note.is_deleted.is_(True))

    async def purge_expired_trash(
        self, db: AsyncSession, retention: timedelta
    ) -> int:
        """
        The trash reaper: remove notes trashed longer than `retention` ago.

        Notes flagged as deleted without a deleted_at stamp (e.g. imported
        data) are left alone; they can still be removed with empty_trash().
        """
        cutoff = utcnow() - retention
        return await self._purge(
            db,
            Note.is_deleted.is_(True) & (Note.deleted_at < cutoff),
        )

    # ── Internals ─────────────────────────────────────────────────────────

    async def _load(self, db: AsyncSession, note_id: str) -> Note:
        key = _parse_id(note_id)
        if key is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        try:
            note = await db.get(Note, key)
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": str(note_id)},
            )
        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note

    async def _purge(self, db: AsyncSession, criteria) -> int:
        # Loaded and deleted through the ORM so the session's identity map
        # never hands out a purged note afterwards
        try:
            result = await db.execute(select(Note).where(criteria))
            doomed = list(result.scalars().all())
            for note in doomed:
                await db.delete(note)
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error purging trash: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not empty the trash. Please try again.",
                context={"error_type": type(e).__name__},
            )
        removed = len(doomed)
        if removed:
            logger.info("Removed %d note(s) from trash", removed)
        return removed


note_service = NoteService()
