"""Unit tests for notes_client.models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from notes_client.models import DraftNote, Identity, Note


class TestDraftNote:
    def test_defaults(self) -> None:
        draft = DraftNote()
        assert draft.title == ""
        assert draft.content == ""

    def test_has_no_id(self) -> None:
        assert not hasattr(DraftNote(title="T", content="C"), "id")

    def test_to_record(self) -> None:
        assert DraftNote(title="T", content="C").to_record() == {
            "title": "T",
            "content": "C",
        }


class TestNote:
    def test_id_required(self) -> None:
        with pytest.raises(ValidationError):
            Note(title="T", content="C")

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Note(id="", title="T", content="C")

    def test_empty_title_and_content_allowed(self) -> None:
        note = Note(id="a", title="", content="")
        assert note.title == ""

    def test_record_excludes_id(self) -> None:
        note = Note(id="abc", title="T", content="C")
        assert note.to_record() == {"title": "T", "content": "C"}

    def test_with_changes_keeps_id(self) -> None:
        note = Note(id="abc", title="T", content="C")
        changed = note.with_changes(title="New")
        assert changed.id == "abc"
        assert changed.title == "New"
        assert note.title == "T"

    def test_frozen(self) -> None:
        note = Note(id="abc", title="T", content="C")
        with pytest.raises(ValidationError):
            note.title = "other"


class TestFromDocument:
    def test_valid_document(self) -> None:
        note = Note.from_document("doc1", {"title": "T", "content": "C"})
        assert note == Note(id="doc1", title="T", content="C")

    def test_extra_fields_ignored(self) -> None:
        note = Note.from_document("doc1", {"title": "T", "content": "C", "tags": ["x"]})
        assert note.title == "T"

    def test_id_field_in_body_ignored(self) -> None:
        """The document key wins over an ``id`` stored in the body."""
        note = Note.from_document("doc1", {"id": "other", "title": "T", "content": "C"})
        assert note.id == "doc1"

    def test_missing_content(self) -> None:
        with pytest.raises(ValidationError):
            Note.from_document("doc1", {"title": "T"})

    def test_wrong_type(self) -> None:
        with pytest.raises(ValidationError):
            Note.from_document("doc1", {"title": 42, "content": "C"})

    def test_non_mapping(self) -> None:
        with pytest.raises(ValidationError):
            Note.from_document("doc1", ["not", "a", "dict"])


class TestIdentity:
    def test_optional_fields(self) -> None:
        identity = Identity(uid="u1")
        assert identity.email == ""
        assert identity.id_token == ""
