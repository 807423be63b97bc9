"""
Notekeep Client
===============

Async client for the Notekeep API: fetches the whole collection once, keeps it
in memory and in a local JSON cache, and derives filtered/sorted/grouped views
without further server calls.

    api.py      NotesAPI: one method per REST endpoint (httpx)
    cache.py    NoteCache: the local JSON mirror (aiofiles)
    models.py   ClientNote: client-side note shape
    views.py    ViewState and the filter → sort → partition pipeline
    session.py  NotesClient: in-memory collection and mutation flow
"""

from app.client.api import NotesAPI
from app.client.cache import NoteCache
from app.client.models import ClientNote
from app.client.session import NotesClient
from app.client.views import NoteView, ViewState, derive_view, tag_vocabulary

__all__ = [
    "ClientNote",
    "NoteCache",
    "NoteView",
    "NotesAPI",
    "NotesClient",
    "ViewState",
    "derive_view",
    "tag_vocabulary",
]
