"""Firebase notes client: session, live notes and their backends."""

from notes_client.app import NotesApp
from notes_client.exceptions import AuthError, ConfigurationError, NotesClientError, StoreError
from notes_client.memory import InMemoryBackend
from notes_client.models import DraftNote, Identity, Note
from notes_client.notes import NotesRepository
from notes_client.observable import Observable, Subscription
from notes_client.session import SessionController

__all__ = [
    "AuthError",
    "ConfigurationError",
    "DraftNote",
    "Identity",
    "InMemoryBackend",
    "Note",
    "NotesApp",
    "NotesClientError",
    "NotesRepository",
    "Observable",
    "SessionController",
    "StoreError",
    "Subscription",
]
