"""Firebase Notes — Streamlit interface.

Run with:
    streamlit run ui/app.py
    streamlit run ui/app.py -- --demo      # in-memory backend, no Firebase
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so `ui.*` imports resolve
# regardless of the working directory Streamlit uses.
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import streamlit as st  # noqa: E402

st.set_page_config(page_title="Notes", page_icon="📝", layout="centered")

from notes_client.app import NotesApp  # noqa: E402
from notes_client.config import configure_logging, get_settings  # noqa: E402
from notes_client.exceptions import ConfigurationError  # noqa: E402
from ui.components import login, notes  # noqa: E402


def _get_app() -> NotesApp:
    """One NotesApp per browser session."""
    if "notes_app" not in st.session_state:
        settings = get_settings()
        configure_logging(settings.log_level)
        demo = "--demo" in sys.argv
        try:
            st.session_state.notes_app = NotesApp.for_environment(settings, demo=demo)
        except ConfigurationError as exc:
            st.error(str(exc))
            st.stop()
        st.session_state.demo_mode = demo
    return st.session_state.notes_app


app = _get_app()

if app.signed_in:
    notes.render(app)
else:
    login.render(app)

if st.session_state.get("demo_mode"):
    st.caption("Demo mode: notes live in memory and vanish when the app stops.")
