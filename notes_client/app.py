"""Composition root: wires the session controller and the notes repository."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Callable, Optional

from notes_client.backend import DocumentStore, IdentityProvider
from notes_client.config import Settings, get_settings
from notes_client.exceptions import ConfigurationError
from notes_client.firebase_auth import FirebaseAuthProvider
from notes_client.firestore_store import FirestoreDocumentStore
from notes_client.memory import InMemoryBackend
from notes_client.models import Identity
from notes_client.notes import DEFAULT_COLLECTION, NotesRepository
from notes_client.session import SessionController

logger = logging.getLogger(__name__)

StoreFactory = Callable[[Optional[Identity]], DocumentStore]


class NotesApp:
    """One signed-in (or signed-out) client and, once opened, its notes."""

    def __init__(
        self,
        provider: IdentityProvider,
        store_factory: StoreFactory,
        collection: str = DEFAULT_COLLECTION,
    ) -> None:
        self.session = SessionController(provider)
        self._store_factory = store_factory
        self._collection = collection
        self._store: Optional[DocumentStore] = None
        self.repository: Optional[NotesRepository] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "NotesApp":
        """Firebase-backed app for the configured project."""
        settings = settings or get_settings()
        provider = FirebaseAuthProvider.from_settings(settings)
        app = cls(
            provider,
            lambda identity: FirestoreDocumentStore.from_settings(
                settings, identity, provider.refresh
            ),
            settings.notes_collection,
        )
        logger.info("Configured Firebase project %s", settings.firebase_project_id)
        return app

    @classmethod
    def demo(cls, backend: Optional[InMemoryBackend] = None) -> "NotesApp":
        """App over an in-process backend; nothing leaves the machine."""
        backend = backend or InMemoryBackend()
        logger.info("Running against the in-memory backend")
        return cls(backend, lambda identity: backend)

    @classmethod
    def for_environment(cls, settings: Settings, demo: bool = False) -> "NotesApp":
        """Firebase app, or the in-memory one when *demo* is asked for.

        Raises ConfigurationError when Firebase is not configured and demo
        mode was not requested.
        """
        if demo:
            return cls.demo()
        if not settings.configured:
            raise ConfigurationError(
                "Firebase is not configured: set NOTES_FIREBASE_API_KEY and "
                "NOTES_FIREBASE_PROJECT_ID, or start with --demo"
            )
        return cls.from_settings(settings)

    @property
    def signed_in(self) -> bool:
        return self.session.signed_in

    def open_notes(self) -> NotesRepository:
        """Return the live notes repository, creating it on first use."""
        if self.repository is None:
            self._store = self._store_factory(self.session.user.value)
            self.repository = NotesRepository(self._store, self._collection)
        self.repository.subscribe()
        return self.repository

    def close_notes(self) -> None:
        """Tear down the notes screen: stop listening and drop the store."""
        repository, self.repository = self.repository, None
        store, self._store = self._store, None
        if repository is not None:
            repository.close()
        if isinstance(store, FirestoreDocumentStore):
            store.close()

    def sign_out(self) -> Future:
        self.close_notes()
        return self.session.sign_out()

    def close(self) -> None:
        self.close_notes()
        self.session.close()
