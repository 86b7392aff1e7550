"""Add / edit dialog: Title and Content fields with Save and Cancel."""

from __future__ import annotations

from typing import Optional

import streamlit as st

from notes_client.models import Note
from notes_client.notes import NotesRepository


def _save(repository: NotesRepository, note: Optional[Note], title: str, content: str) -> None:
    """Create a new note, or overwrite *note* when editing."""
    if note is None:
        repository.create(title, content)
    else:
        repository.update(note.with_changes(title=title, content=content))


@st.dialog("Add")
def add_note(repository: NotesRepository) -> None:
    _render_form(repository, None)


@st.dialog("Edit")
def edit_note(repository: NotesRepository, note: Note) -> None:
    _render_form(repository, note)


def _render_form(repository: NotesRepository, note: Optional[Note]) -> None:
    key = note.id if note is not None else "new"
    st.subheader("Note Details")
    title = st.text_input("Title", value=note.title if note else "", key=f"title_{key}")
    content = st.text_input(
        "Content", value=note.content if note else "", key=f"content_{key}"
    )

    col_save, col_cancel = st.columns(2)
    if col_save.button("Save", type="primary", use_container_width=True):
        _save(repository, note, title, content)
        st.rerun()
    if col_cancel.button("Cancel", use_container_width=True):
        st.rerun()
