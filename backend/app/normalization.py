"""
Notekeep: Note Field Normalization
===================================

Pure functions shared by the server schemas and the client form path, so a
note created through the API and a note edited through the client end up with
identical titles and tags.
"""

from typing import Iterable, List, Optional, Union

# Client-side form limits (the server only requires a non-empty title)
MAX_TITLE_LENGTH = 100
MAX_CONTENT_LENGTH = 5000


def normalize_title(title: Optional[str]) -> str:
    """Trim surrounding whitespace. None becomes an empty string."""
    return (title or "").strip()


def normalize_tags(tags: Union[str, Iterable[str], None]) -> List[str]:
    """
    Normalize a tag list.

    Accepts either an iterable of strings or the comma-separated text a tag
    input field produces ("Work, ideas,,work"). Each tag is trimmed and
    lowercased; empty tags are dropped; duplicates are removed keeping the
    first occurrence so display order matches what the user typed.

    Examples:
        >>> normalize_tags("Work, ideas,,work")
        ['work', 'ideas']
        >>> normalize_tags([" Todo ", "TODO", ""])
        ['todo']
    """
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")

    seen = set()
    result: List[str] = []
    for raw in tags:
        tag = str(raw).strip().lower()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result
