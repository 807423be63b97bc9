"""
Notekeep Client: View Derivation
=================================

What:  Turns the full in-memory note collection plus the user's view state
       into the two groups a notes screen renders: pinned notes, then the rest.
How:   Pure functions, no I/O. The pipeline is

           scope → filter (search + tag) → sort → partition

       and every step preserves the relative order of notes it keeps, so ties
       in the sort fall back to insertion order without a secondary key.

Title sorting is locale-aware in the sense users expect from a notes list:
accents are folded and case is ignored, so "apple", "Banana", "Cherry" sort
in that order rather than by code point (which would put "apple" last).
"""

import unicodedata
from typing import Iterable, List, Literal, Sequence

from pydantic import BaseModel, Field

from app.client.models import ClientNote

ALL_TAGS = "all"

SortField = Literal["date", "title"]
SortOrder = Literal["asc", "desc"]
# all: everything; active: main list; archived: archive page; trash: trash page
Scope = Literal["all", "active", "archived", "trash"]


class ViewState(BaseModel):
    search: str = ""
    tag: str = ALL_TAGS
    sort_by: SortField = "date"
    order: SortOrder = "desc"
    scope: Scope = "all"


class NoteView(BaseModel):
    pinned: List[ClientNote] = Field(default_factory=list)
    others: List[ClientNote] = Field(default_factory=list)

    @property
    def notes(self) -> List[ClientNote]:
        """Pinned group followed by the rest: the full filtered, sorted set."""
        return [*self.pinned, *self.others]

    def __len__(self) -> int:
        return len(self.pinned) + len(self.others)


def title_sort_key(title: str) -> str:
    decomposed = unicodedata.normalize("NFKD", title)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def in_scope(note: ClientNote, scope: Scope) -> bool:
    if scope == "active":
        return not note.is_archived and not note.is_deleted
    if scope == "archived":
        return note.is_archived and not note.is_deleted
    if scope == "trash":
        return note.is_deleted
    return True


def matches(note: ClientNote, search: str, tag: str) -> bool:
    """Search is a case-insensitive substring of title or content; tag must be present."""
    term = search.casefold()
    if term and term not in note.title.casefold() and term not in note.content.casefold():
        return False
    return tag == ALL_TAGS or tag in note.tags


def filter_notes(notes: Iterable[ClientNote], state: ViewState) -> List[ClientNote]:
    return [
        note for note in notes
        if in_scope(note, state.scope) and matches(note, state.search, state.tag)
    ]


def sort_notes(
    notes: Sequence[ClientNote],
    sort_by: SortField = "date",
    order: SortOrder = "desc",
) -> List[ClientNote]:
    # sorted() is stable in both directions, so equal keys keep input order
    reverse = order == "desc"
    if sort_by == "title":
        return sorted(notes, key=lambda n: title_sort_key(n.title), reverse=reverse)
    return sorted(notes, key=lambda n: n.updated_at, reverse=reverse)


def partition_notes(notes: Sequence[ClientNote]) -> NoteView:
    return NoteView(
        pinned=[note for note in notes if note.is_pinned],
        others=[note for note in notes if not note.is_pinned],
    )


def derive_view(notes: Iterable[ClientNote], state: ViewState) -> NoteView:
    """Run the full scope → filter → sort → partition pipeline."""
    selected = filter_notes(notes, state)
    return partition_notes(sort_notes(selected, state.sort_by, state.order))


def tag_vocabulary(notes: Iterable[ClientNote]) -> List[str]:
    """Options for the tag filter: "all" followed by every tag in first-seen order."""
    tags = dict.fromkeys(tag for note in notes for tag in note.tags if tag)
    tags.pop(ALL_TAGS, None)
    return [ALL_TAGS, *tags]
