"""Unit tests for the Streamlit helpers that do not need a running app."""

from __future__ import annotations

from unittest.mock import MagicMock

from notes_client.exceptions import AuthError, StoreError
from notes_client.models import Note
from ui.components import login, note_form


class TestErrorMessage:
    def test_known_code(self) -> None:
        assert login.error_message(AuthError("EMAIL_EXISTS")) == (
            "An account with this email already exists."
        )

    def test_unknown_code_uses_provider_message(self) -> None:
        exc = AuthError("TOO_MANY_ATTEMPTS_TRY_LATER", "Try again later")
        assert login.error_message(exc) == "Try again later"

    def test_other_errors(self) -> None:
        assert "boom" in login.error_message(StoreError("insert", "boom"))

    def test_session_cache_failure(self) -> None:
        exc = AuthError("SESSION_CACHE_FAILED", "[Errno 17] File exists")
        assert "could not be saved" in login.error_message(exc)


class TestSave:
    def test_new_note_creates(self) -> None:
        repository = MagicMock()

        note_form._save(repository, None, "Title", "Body")

        repository.create.assert_called_once_with("Title", "Body")
        repository.update.assert_not_called()

    def test_existing_note_updates(self) -> None:
        repository = MagicMock()
        note = Note(id="n1", title="Old", content="old")

        note_form._save(repository, note, "New", "new")

        repository.update.assert_called_once_with(Note(id="n1", title="New", content="new"))
        repository.create.assert_not_called()
