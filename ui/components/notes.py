"""Notes page: the live list with add, edit, delete and sign-out."""

from __future__ import annotations

import streamlit as st

from notes_client.app import NotesApp
from notes_client.config import get_settings
from notes_client.notes import NotesRepository
from ui.components import note_form


def render(app: NotesApp) -> None:
    """Render the notes page for the signed-in user."""
    repository = app.open_notes()

    col_title, col_add = st.columns([5, 1])
    col_title.title("Notes")
    if col_add.button("➕", help="Add note", use_container_width=True):
        note_form.add_note(repository)

    editing = st.session_state.pop("editing_note", None)
    if editing is not None:
        note_form.edit_note(repository, editing)

    _render_list(repository)

    st.divider()
    if st.button("Sign Out", type="primary", use_container_width=True):
        app.sign_out().result()
        st.rerun()


@st.fragment(run_every=get_settings().ui_refresh_seconds)
def _render_list(repository: NotesRepository) -> None:
    """List redrawn on a timer so subscription deliveries show up."""
    notes = repository.notes.value
    if not notes:
        st.caption("No notes yet. Use ➕ to add one.")

    for note in notes:
        with st.container(border=True):
            col_text, col_edit, col_delete = st.columns([6, 1, 1])
            col_text.markdown(f"**{note.title}**")
            col_text.caption(note.content)
            if col_edit.button("Edit", key=f"edit_{note.id}"):
                # dialogs open from a full run, not from inside the fragment
                st.session_state.editing_note = note
                st.rerun()
            if col_delete.button("Delete", key=f"delete_{note.id}"):
                repository.delete(note)

    last_error = repository.last_error.value
    if last_error is not None:
        st.warning(f"Last sync problem: {last_error}")
