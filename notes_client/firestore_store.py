"""Cloud Firestore document store.

A thin wrapper over ``google-cloud-firestore``: writes go straight to the
collection, and ``observe`` registers a snapshot listener whose results are
handed on as ``(document id, data)`` pairs in query order.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError, RefreshError
from google.cloud import firestore
from google.cloud.firestore_v1.watch import Watch
from google.oauth2.credentials import Credentials

from notes_client.backend import Snapshot
from notes_client.config import Settings
from notes_client.exceptions import AuthError, StoreError
from notes_client.models import Identity
from notes_client.observable import Subscription

logger = logging.getLogger(__name__)

# Errors a Firestore call can raise: API failures and credential refresh failures.
CLIENT_ERRORS = (GoogleAPIError, GoogleAuthError)

TokenRefresher = Callable[[Identity], Identity]


def _naive_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """google-auth compares expiries against naive UTC timestamps."""
    if moment is None or moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def user_credentials(identity: Identity, refresh: Optional[TokenRefresher] = None) -> Credentials:
    """Bearer credentials carrying the user's Firebase ID token.

    With *refresh*, an expired token is exchanged for a new one before the
    next request. A token of unknown age is refreshed on first use.
    """
    if refresh is None:
        return Credentials(token=identity.id_token)

    current = identity

    def _refresh_handler(request: Any, scopes: Any = None) -> tuple[str, datetime]:
        nonlocal current
        try:
            current = refresh(current)
        except AuthError as exc:
            raise RefreshError(str(exc)) from exc
        return current.id_token, _naive_utc(current.expires_at)

    expiry = _naive_utc(identity.expires_at)
    return Credentials(
        token=identity.id_token if expiry is not None else None,
        expiry=expiry,
        refresh_handler=_refresh_handler,
    )


class WatchSubscription(Subscription):
    """Subscription over a Firestore ``Watch``.

    Goes inactive when cancelled and also when the watch stream has shut
    down on its own.
    """

    def __init__(self, watch: Watch) -> None:
        super().__init__(watch.unsubscribe)
        self._watch = watch

    @property
    def active(self) -> bool:
        return super().active and bool(self._watch.is_active)


class FirestoreDocumentStore:
    """DocumentStore backed by a ``firestore.Client``."""

    def __init__(self, client: firestore.Client) -> None:
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        identity: Optional[Identity] = None,
        refresh: Optional[TokenRefresher] = None,
    ) -> "FirestoreDocumentStore":
        """Build a client for the configured project.

        With an *identity*, requests carry its Firebase ID token so that
        security rules see the signed-in user, and *refresh* keeps that token
        current. Without one the library falls back to application-default
        credentials (or the emulator when ``FIRESTORE_EMULATOR_HOST`` is set).
        """
        credentials = None
        if identity is not None and identity.id_token:
            credentials = user_credentials(identity, refresh)
        client = firestore.Client(
            project=settings.firebase_project_id or None,
            credentials=credentials,
        )
        return cls(client)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, collection: str, record: dict[str, Any]) -> str:
        try:
            _, ref = self._client.collection(collection).add(record)
        except CLIENT_ERRORS as exc:
            raise StoreError("insert", str(exc)) from exc
        return ref.id

    def replace(self, collection: str, doc_id: str, record: dict[str, Any]) -> None:
        try:
            self._client.collection(collection).document(doc_id).set(record)
        except CLIENT_ERRORS as exc:
            raise StoreError("replace", str(exc)) from exc

    def remove(self, collection: str, doc_id: str) -> None:
        try:
            self._client.collection(collection).document(doc_id).delete()
        except CLIENT_ERRORS as exc:
            raise StoreError("remove", str(exc)) from exc

    # ------------------------------------------------------------------
    # Live query
    # ------------------------------------------------------------------

    def observe(
        self,
        collection: str,
        order_field: str,
        on_snapshot: Callable[[Snapshot], None],
        on_error: Callable[[Exception], None],
    ) -> Subscription:
        query = self._client.collection(collection).order_by(order_field)

        def _listener(docs, changes, read_time) -> None:
            on_snapshot([(doc.id, doc.to_dict()) for doc in docs])

        try:
            watch = query.on_snapshot(_listener)
        except CLIENT_ERRORS as exc:
            # Listener never opened: report and hand back a dead handle.
            on_error(StoreError("observe", str(exc)))
            sub = Subscription()
            sub.cancel()
            return sub

        logger.info("Listening on %s ordered by %s", collection, order_field)
        return WatchSubscription(watch)

    def close(self) -> None:
        self._client.close()
