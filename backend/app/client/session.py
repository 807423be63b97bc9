"""
Notekeep Client: Notes Session
===============================

What:  The client's working copy of the note collection.
Why:   Replaces ambient global state with one object that owns the list and
       receives its collaborators (NotesAPI, NoteCache) explicitly.
How:   Reads come from the in-memory list. Every mutation goes to the server
       first; only after the server confirms is the local list updated (by id)
       and mirrored to the cache. Nothing is re-fetched after a mutation.

Failure semantics:
    load()        server unreachable → serve the cached copy and switch to
                  stale, read-only mode until the next successful load();
                  no cache either → NetworkError propagates.
    mutations     while stale → NetworkError without contacting the server.
                  server failure → the exception propagates and local state
                  and cache are unchanged (nothing to roll back).

Concurrency:
    Last write wins. The cache is overwritten with whatever the latest
    successful fetch or mutation produced; there is no version token.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from app.client.api import NotesAPI
from app.client.cache import NoteCache
from app.client.models import ClientNote
from app.client.views import NoteView, ViewState, derive_view, tag_vocabulary
from app.config import client_settings
from app.exceptions import NetworkError, NotFoundError, ValidationError
from app.normalization import (
    MAX_CONTENT_LENGTH,
    MAX_TITLE_LENGTH,
    normalize_tags,
    normalize_title,
)

logger = logging.getLogger(__name__)

TagInput = Union[str, Sequence[str], None]


def validate_form(title: Optional[str], content: Optional[str]) -> None:
    """
    Client-side form rules, checked before anything is sent.

    `None` means "field not being changed" (edit form); the create path always
    passes a title.
    """
    if title is not None:
        if not title:
            raise ValidationError("Please enter a title for your note", field="title")
        if len(title) > MAX_TITLE_LENGTH:
            raise ValidationError(
                f"Title must be at most {MAX_TITLE_LENGTH} characters", field="title"
            )
    if content is not None and len(content) > MAX_CONTENT_LENGTH:
        raise ValidationError(
            f"Content must be at most {MAX_CONTENT_LENGTH} characters", field="content"
        )


class NotesClient:
    """
    In-memory note collection backed by the API and mirrored to a local cache.

    Usage:
        async with NotesClient.from_settings() as client:
            await client.load()
            view = client.view(ViewState(search="milk", sort_by="title"))
            await client.toggle_pin(view.notes[0].id)
    """

    def __init__(self, api: NotesAPI, cache: NoteCache):
        self.api = api
        self.cache = cache
        self.notes: List[ClientNote] = []
        self.is_stale = False

    @classmethod
    def from_settings(cls) -> "NotesClient":
        return cls(
            api=NotesAPI(client_settings.api_url, timeout=client_settings.api_timeout),
            cache=NoteCache(client_settings.cache_path),
        )

    async def __aenter__(self) -> "NotesClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.api.close()

    # ── Reads ─────────────────────────────────────────────────────────────

    async def load(self) -> List[ClientNote]:
        """Fetch the full collection, falling back to the cache when offline."""
        try:
            notes = await self.api.list_notes()
        except NetworkError:
            cached = await self.cache.load()
            if cached is None:
                raise
            logger.warning("Server unreachable; using %d cached note(s)", len(cached))
            self.notes = cached
            self.is_stale = True
            return self.notes

        self.notes = notes
        self.is_stale = False
        await self._mirror()
        return self.notes

    def find(self, note_id: str) -> ClientNote:
        for note in self.notes:
            if note.id == note_id:
                return note
        raise NotFoundError(resource="note", resource_id=note_id)

    def view(self, state: Optional[ViewState] = None) -> NoteView:
        return derive_view(self.notes, state or ViewState())

    def tags(self) -> List[str]:
        return tag_vocabulary(self.notes)

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create(
        self,
        title: str,
        content: str = "",
        tags: TagInput = None,
        is_pinned: bool = False,
    ) -> ClientNote:
        title = normalize_title(title)
        content = content.strip()
        validate_form(title, content)
        self._ensure_writable()

        note = await self.api.create_note({
            "title": title,
            "content": content,
            "tags": normalize_tags(tags),
            "isPinned": is_pinned,
        })
        self.notes.insert(0, note)
        await self._mirror()
        return note

    async def update(
        self,
        note_id: str,
        *,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: TagInput = None,
        is_pinned: Optional[bool] = None,
        is_archived: Optional[bool] = None,
        is_deleted: Optional[bool] = None,
    ) -> ClientNote:
        """Send only the given fields; replace the local copy with the server's."""
        changes: Dict[str, Any] = {}
        if title is not None:
            title = normalize_title(title)
            changes["title"] = title
        if content is not None:
            content = content.strip()
            changes["content"] = content
        if tags is not None:
            changes["tags"] = normalize_tags(tags)
        for key, value in (
            ("isPinned", is_pinned),
            ("isArchived", is_archived),
            ("isDeleted", is_deleted),
        ):
            if value is not None:
                changes[key] = value

        validate_form(title, content)
        self._ensure_writable()

        note = await self.api.update_note(note_id, changes)
        self._replace(note)
        await self._mirror()
        return note

    async def toggle_pin(self, note_id: str) -> ClientNote:
        current = self.find(note_id)
        return await self.update(note_id, is_pinned=not current.is_pinned)

    async def archive(self, note_id: str) -> ClientNote:
        return await self.update(note_id, is_archived=True)

    async def unarchive(self, note_id: str) -> ClientNote:
        return await self.update(note_id, is_archived=False)

    async def trash(self, note_id: str) -> ClientNote:
        return await self.update(note_id, is_deleted=True)

    async def restore(self, note_id: str) -> ClientNote:
        return await self.update(note_id, is_deleted=False)

    async def delete(self, note_id: str) -> bool:
        """Permanently delete a note on the server, then drop it locally."""
        self._ensure_writable()
        await self.api.delete_note(note_id)
        self.notes = [note for note in self.notes if note.id != note_id]
        await self._mirror()
        return True

    async def empty_trash(self) -> int:
        self._ensure_writable()
        removed = await self.api.empty_trash()
        self.notes = [note for note in self.notes if not note.is_deleted]
        await self._mirror()
        return removed

    # ── Internals ─────────────────────────────────────────────────────────

    def _ensure_writable(self) -> None:
        if self.is_stale:
            raise NetworkError(
                message="Working offline from cached notes; reload before making changes",
                context={"stale": True},
            )

    def _replace(self, updated: ClientNote) -> None:
        for index, note in enumerate(self.notes):
            if note.id == updated.id:
                self.notes[index] = updated
                return
        self.notes.append(updated)

    async def _mirror(self) -> None:
        # The server already holds the authoritative copy; a cache write
        # failure only costs offline access
        try:
            await self.cache.save(self.notes)
        except OSError as e:
            logger.warning("Could not write note cache %s: %s", self.cache.path, str(e))
