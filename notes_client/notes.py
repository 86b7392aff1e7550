"""Notes repository: a live, title-ordered view of the notes collection.

The local list is only ever replaced by a snapshot from the live query.
Creates, updates and deletes are written to the store and show up locally
when the store echoes them back on the subscription.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from pydantic import ValidationError

from notes_client.backend import DocumentStore, Snapshot
from notes_client.exceptions import NotesClientError
from notes_client.metrics import (
    DROPPED_DOCUMENTS,
    LISTED_NOTES,
    SKIPPED_WRITES,
    SNAPSHOT_DELIVERIES,
    STORE_WRITES,
)
from notes_client.models import AnyNote, DraftNote, Note
from notes_client.observable import Observable, Subscription

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "notes"
ORDER_FIELD = "title"


class NotesRepository:
    """Keeps ``notes`` in sync with the remote collection."""

    def __init__(
        self,
        store: DocumentStore,
        collection: str = DEFAULT_COLLECTION,
        executor: Optional[Executor] = None,
    ) -> None:
        self._store = store
        self._collection = collection
        self._owns_executor = executor is None
        # one worker keeps writes in submission order
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="notes"
        )
        self._lock = threading.Lock()
        self._subscription: Optional[Subscription] = None
        self._generation = 0

        self.notes: Observable[list[Note]] = Observable([], "notes")
        self.last_error: Observable[Optional[Exception]] = Observable(None, "notes.last_error")

    @property
    def collection(self) -> str:
        return self._collection

    @property
    def subscribed(self) -> bool:
        sub = self._subscription
        return sub is not None and sub.active

    # ------------------------------------------------------------------
    # Live query
    # ------------------------------------------------------------------

    def subscribe(self) -> None:
        """Open the live query. Does nothing while one is already open."""
        with self._lock:
            if self.subscribed:
                logger.debug("Already listening on %s", self._collection)
                return
            stale, self._subscription = self._subscription, None
            self._generation += 1
            generation = self._generation

        if stale is not None:
            # the store closed the listener without a cancel from us
            logger.warning("Listener on %s was closed by the store", self._collection)
            stale.cancel()

        subscription = self._store.observe(
            self._collection,
            ORDER_FIELD,
            lambda snapshot: self._on_snapshot(generation, snapshot),
            lambda exc: self._on_error(generation, exc),
        )
        with self._lock:
            if generation == self._generation:
                self._subscription = subscription
                return
        # unsubscribe() ran while observe() was opening
        subscription.cancel()

    def unsubscribe(self) -> None:
        """Cancel the live query; later deliveries are ignored."""
        with self._lock:
            subscription, self._subscription = self._subscription, None
            self._generation += 1
        if subscription is not None:
            subscription.cancel()
            logger.info("Stopped listening on %s", self._collection)

    def close(self) -> None:
        self.unsubscribe()
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, title: str, content: str) -> Future:
        """Add a new note; the store assigns its id."""
        draft = DraftNote(title=title, content=content)
        return self._submit(
            "create", lambda: self._store.insert(self._collection, draft.to_record())
        )

    def update(self, note: AnyNote) -> Optional[Future]:
        """Overwrite the stored note. Returns None for a never-saved note."""
        if not isinstance(note, Note):
            return self._skip("update", note)
        return self._submit(
            "update",
            lambda: self._store.replace(self._collection, note.id, note.to_record()),
        )

    def delete(self, note: AnyNote) -> Optional[Future]:
        """Remove the stored note. Returns None for a never-saved note."""
        if not isinstance(note, Note):
            return self._skip("delete", note)
        return self._submit(
            "delete", lambda: self._store.remove(self._collection, note.id)
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _submit(self, operation: str, call: Callable[[], Any]) -> Future:
        return self._executor.submit(self._run_write, operation, call)

    def _run_write(self, operation: str, call: Callable[[], Any]) -> Any:
        try:
            result = call()
        except NotesClientError as exc:
            STORE_WRITES.labels(operation=operation, status="error").inc()
            logger.error("Error during note %s: %s", operation, exc)
            self.last_error.set(exc)
            return None
        STORE_WRITES.labels(operation=operation, status="success").inc()
        logger.debug("Note %s sent to %s", operation, self._collection)
        return result

    def _skip(self, operation: str, note: AnyNote) -> None:
        SKIPPED_WRITES.labels(operation=operation).inc()
        logger.debug("Ignoring %s of unsaved note %r", operation, note)
        return None

    def _on_snapshot(self, generation: int, snapshot: Snapshot) -> None:
        if generation != self._generation:
            return
        notes: list[Note] = []
        for doc_id, data in snapshot:
            try:
                notes.append(Note.from_document(doc_id, data))
            except ValidationError as exc:
                DROPPED_DOCUMENTS.inc()
                logger.warning(
                    "Dropping document %s/%s: %d validation error(s)",
                    self._collection,
                    doc_id,
                    exc.error_count(),
                )
        SNAPSHOT_DELIVERIES.labels(status="ok").inc()
        LISTED_NOTES.set(len(notes))
        self.notes.set(notes)

    def _on_error(self, generation: int, exc: Exception) -> None:
        if generation != self._generation:
            return
        SNAPSHOT_DELIVERIES.labels(status="error").inc()
        logger.error("Error getting notes: %s", exc)
        self.last_error.set(exc)
