"""
Notekeep: Normalization Unit Tests
===================================

Title trimming and tag normalization are shared by the API schemas and the
client form path, so they get their own focused tests.
"""

import pytest

from app.normalization import normalize_tags, normalize_title
from app.schemas.note import NoteCreate, NoteUpdate


class TestNormalizeTags:

    def test_lowercases_and_trims(self):
        assert normalize_tags([" Work ", "IDEAS"]) == ["work", "ideas"]

    def test_drops_empty_tags(self):
        assert normalize_tags(["", "  ", "todo"]) == ["todo"]

    def test_dedupes_keeping_first_occurrence(self):
        assert normalize_tags(["b", "a", "B", "c", "a"]) == ["b", "a", "c"]

    def test_accepts_comma_separated_string(self):
        assert normalize_tags("Work, ideas,,work ,") == ["work", "ideas"]

    def test_none_is_empty(self):
        assert normalize_tags(None) == []

    @pytest.mark.parametrize("raw", [["A", "b "], "x, Y, x", [" ", ""]])
    def test_idempotent(self, raw):
        once = normalize_tags(raw)
        assert normalize_tags(once) == once


class TestNormalizeTitle:

    def test_trims_whitespace(self):
        assert normalize_title("  Groceries \n") == "Groceries"

    def test_none_becomes_empty(self):
        assert normalize_title(None) == ""


class TestSchemaNormalization:
    """The request schemas apply the shared functions on the way in."""

    def test_create_normalizes_title_and_tags(self):
        data = NoteCreate.model_validate(
            {"title": "  Plan  ", "tags": "Work, work, Home", "isPinned": True}
        )
        assert data.title == "Plan"
        assert data.tags == ["work", "home"]
        assert data.is_pinned is True

    def test_create_missing_title_defaults_to_empty(self):
        assert NoteCreate.model_validate({"content": "x"}).title == ""

    def test_create_accepts_snake_case(self):
        assert NoteCreate.model_validate({"title": "t", "is_pinned": True}).is_pinned is True

    def test_update_keeps_unset_fields_unset(self):
        data = NoteUpdate.model_validate({"isPinned": False, "tags": ["A", "a"]})
        assert data.model_dump(exclude_unset=True) == {"is_pinned": False, "tags": ["a"]}

    def test_update_ignores_unknown_fields(self):
        data = NoteUpdate.model_validate({"id": "x", "createdAt": "2020-01-01T00:00:00Z"})
        assert data.model_dump(exclude_unset=True) == {}

    @pytest.mark.parametrize("raw", ["  Plan  ", "\tPlan\n", "Plan", "   "])
    def test_create_and_update_trim_titles_identically(self, raw):
        created = NoteCreate.model_validate({"title": raw}).title
        updated = NoteUpdate.model_validate({"title": raw}).title
        assert created == updated == normalize_title(raw)

    def test_update_without_title_leaves_it_unset(self):
        data = NoteUpdate.model_validate({"title": None})
        assert data.title is None
