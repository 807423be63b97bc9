"""
Notekeep Backend: Notes Route Handlers
=======================================

What:  The /notes REST surface: list, get, create, partial update, delete,
       plus the two trash endpoints.
How:   Thin handlers. Each one extracts request data, delegates to
       NoteService, and sets status codes and headers.

Route order matters: /notes/trash and /notes/trash/purge are declared before
/notes/{note_id} so "trash" is never captured as a note id.

Update verb:
    PATCH only. The body is a partial note; absent fields are left untouched.
"""

import logging
from datetime import timedelta
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.schemas.note import (
    ErrorResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
    PurgeResponse,
)
from app.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Notes"])

NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[NoteResponse],
    summary="List all notes",
    description=(
        "Returns every stored note, including archived and trashed ones, in "
        "insertion order. Filtering, sorting and grouping happen on the client."
    ),
)
async def list_notes(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    notes = await note_service.list_notes(db)
    response.headers["X-Total-Count"] = str(len(notes))
    return notes


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=NoteResponse,
    responses={400: {"description": "Title missing or blank", "model": ErrorResponse}},
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """
    Create a note. The store assigns the id and both timestamps.

    Tags may be sent as a list or as a comma-separated string; either way they
    are trimmed, lowercased and deduped before storage.
    """
    return await note_service.create_note(db, payload)


@router.delete(
    "/trash",
    response_model=PurgeResponse,
    summary="Empty the trash",
    description="Permanently removes every note whose isDeleted flag is set.",
)
async def empty_trash(db: AsyncSession = Depends(get_db_session)) -> PurgeResponse:
    removed = await note_service.empty_trash(db)
    return PurgeResponse(deleted=removed)


@router.post(
    "/trash/purge",
    response_model=PurgeResponse,
    summary="Run the trash reaper",
    description=(
        "Permanently removes notes that have been in the trash longer than "
        "TRASH_RETENTION_DAYS. Does nothing when the retention is 0."
    ),
)
async def purge_trash(db: AsyncSession = Depends(get_db_session)) -> PurgeResponse:
    if settings.trash_retention_days <= 0:
        return PurgeResponse(deleted=0)
    removed = await note_service.purge_expired_trash(
        db, timedelta(days=settings.trash_retention_days)
    )
    return PurgeResponse(deleted=removed)


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses=NOT_FOUND,
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.get_note(db, note_id)


@router.patch(
    "/{note_id}",
    response_model=NoteResponse,
    responses={
        **NOT_FOUND,
        400: {"description": "Title set to blank", "model": ErrorResponse},
    },
    summary="Partially update a note",
    description=(
        "Merges the provided fields (title, content, tags, isPinned, isArchived, "
        "isDeleted) onto the stored note and refreshes updatedAt. Setting "
        "isDeleted moves the note to the trash; clearing it restores the note."
    ),
)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(db, note_id, payload)


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND,
    summary="Delete a note permanently",
)
async def delete_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await note_service.delete_note(db, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
