"""
Notekeep Backend: Note Service Tests
=====================================

What we test:
    ✅ Create: blank title rejected, id and timestamps assigned
    ✅ Get/update/delete of unknown ids raise NotFoundError
    ✅ Update merges only provided fields and bumps updated_at
    ✅ Trash flag stamps and clears deleted_at
    ✅ Empty trash and the reaper remove only the right notes
    ✅ SQLAlchemy failures surface as DatabaseError

Mock-session tests cover the error paths; the rest run against SQLite.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import DatabaseError, NotFoundError, ValidationError
from app.models.note import Note
from app.schemas.note import NoteCreate, NoteUpdate
from app.services.note_service import NoteService


def _create(**fields) -> NoteCreate:
    return NoteCreate.model_validate({"title": "Shopping", **fields})


class TestNoteServiceWithMockSession:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_create_rejects_blank_title(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_note(mock_db_session, _create(title="   "))
        assert exc_info.value.field == "title"
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_adds_and_commits(self, mock_db_session):
        result = await self.service.create_note(mock_db_session, _create(tags="A, b"))

        mock_db_session.add.assert_called_once()
        mock_db_session.commit.assert_awaited_once()
        assert result.title == "Shopping"
        assert result.tags == ["a", "b"]

    @pytest.mark.asyncio
    async def test_get_unknown_id_raises_not_found(self, mock_db_session):
        mock_db_session.get.return_value = None
        with pytest.raises(NotFoundError):
            await self.service.get_note(mock_db_session, str(uuid4()))

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found_without_query(self, mock_db_session):
        with pytest.raises(NotFoundError):
            await self.service.get_note(mock_db_session, "not-a-uuid")
        mock_db_session.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_blank_title_rejected_before_lookup(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.update_note(
                mock_db_session, str(uuid4()), NoteUpdate(title="  ")
            )
        mock_db_session.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_commit_failure_becomes_database_error(self, mock_db_session):
        mock_db_session.commit.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
        with pytest.raises(DatabaseError):
            await self.service.create_note(mock_db_session, _create())

    @pytest.mark.asyncio
    async def test_list_failure_becomes_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("gone"))
        with pytest.raises(DatabaseError):
            await self.service.list_notes(mock_db_session)

    @pytest.mark.asyncio
    async def test_update_nudges_timestamp_when_clock_has_not_moved(self, mock_db_session):
        future = datetime.now(timezone.utc) + timedelta(hours=1)
        note = Note(
            id=uuid4(), title="t", content="", tags=[],
            is_pinned=False, is_archived=False, is_deleted=False,
            created_at=future, updated_at=future,
        )
        mock_db_session.get.return_value = note

        result = await self.service.update_note(
            mock_db_session, str(note.id), NoteUpdate(content="x")
        )

        assert result.updated_at == future + timedelta(microseconds=1)
        assert result.created_at == future


class TestNoteStore:
    """Store semantics against a real (SQLite) database."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_equal_timestamps(self, db_session):
        first = await self.service.create_note(db_session, _create())
        second = await self.service.create_note(db_session, _create())

        assert first.id and second.id and first.id != second.id
        assert first.created_at == first.updated_at
        assert first.is_pinned is False
        assert first.is_archived is False and first.is_deleted is False

    @pytest.mark.asyncio
    async def test_list_returns_all_in_insertion_order(self, db_session):
        titles = ["one", "two", "three"]
        for title in titles:
            await self.service.create_note(db_session, _create(title=title))
        await db_session.commit()

        notes = await self.service.list_notes(db_session)
        assert [n.title for n in notes] == titles

    @pytest.mark.asyncio
    async def test_update_merges_fields_and_bumps_updated_at(self, db_session):
        created = await self.service.create_note(
            db_session, _create(content="eggs", tags=["food"])
        )

        updated = await self.service.update_note(
            db_session, created.id, NoteUpdate(is_pinned=True)
        )

        assert updated.is_pinned is True
        assert updated.content == "eggs"
        assert updated.tags == ["food"]
        assert updated.created_at == created.created_at
        assert updated.updated_at > created.updated_at

    @pytest.mark.asyncio
    async def test_successive_updates_strictly_increase_updated_at(self, db_session):
        note = await self.service.create_note(db_session, _create())
        stamps = [note.updated_at]
        for i in range(5):
            note = await self.service.update_note(
                db_session, note.id, NoteUpdate(content=str(i))
            )
            stamps.append(note.updated_at)
        assert stamps == sorted(stamps)
        assert len(set(stamps)) == len(stamps)

    @pytest.mark.asyncio
    async def test_update_unknown_id_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.update_note(db_session, str(uuid4()), NoteUpdate(title="x"))

    @pytest.mark.asyncio
    async def test_delete_then_get_raises_not_found(self, db_session):
        note = await self.service.create_note(db_session, _create())

        assert await self.service.delete_note(db_session, note.id) is True
        with pytest.raises(NotFoundError):
            await self.service.get_note(db_session, note.id)
        with pytest.raises(NotFoundError):
            await self.service.delete_note(db_session, note.id)

    @pytest.mark.asyncio
    async def test_trash_and_restore_maintain_deleted_at(self, db_session):
        note = await self.service.create_note(db_session, _create())

        trashed = await self.service.update_note(db_session, note.id, NoteUpdate(is_deleted=True))
        assert trashed.is_deleted is True
        assert trashed.deleted_at == trashed.updated_at

        restored = await self.service.update_note(db_session, note.id, NoteUpdate(is_deleted=False))
        assert restored.is_deleted is False
        assert restored.deleted_at is None

    @pytest.mark.asyncio
    async def test_empty_trash_removes_only_trashed_notes(self, db_session):
        keep = await self.service.create_note(db_session, _create(title="keep"))
        archived = await self.service.create_note(db_session, _create(title="archived"))
        gone = await self.service.create_note(db_session, _create(title="gone"))
        await self.service.update_note(db_session, archived.id, NoteUpdate(is_archived=True))
        await self.service.update_note(db_session, gone.id, NoteUpdate(is_deleted=True))

        assert await self.service.empty_trash(db_session) == 1

        remaining = {n.id for n in await self.service.list_notes(db_session)}
        assert remaining == {keep.id, archived.id}

    @pytest.mark.asyncio
    async def test_reaper_respects_retention(self, db_session):
        old = await self.service.create_note(db_session, _create(title="old"))
        recent = await self.service.create_note(db_session, _create(title="recent"))
        for note in (old, recent):
            await self.service.update_note(db_session, note.id, NoteUpdate(is_deleted=True))

        stored = await db_session.get(Note, UUID(old.id))
        stored.deleted_at = datetime.now(timezone.utc) - timedelta(days=45)
        await db_session.flush()

        removed = await self.service.purge_expired_trash(db_session, timedelta(days=30))

        assert removed == 1
        remaining = [n.id for n in await self.service.list_notes(db_session)]
        assert remaining == [recent.id]
