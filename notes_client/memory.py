"""In-process identity provider and document store.

Behaves like the Firebase pair from the client's point of view: ids are
assigned by the store, live queries push the full ordered result set after
every write, and sign-out is local. Used by the test suite and the offline
demo mode.
"""

from __future__ import annotations

import copy
import threading
import uuid
from collections import defaultdict
from typing import Any, Callable, Optional

from notes_client.backend import Snapshot
from notes_client.exceptions import AuthError, StoreError
from notes_client.models import Identity
from notes_client.observable import Subscription


def _order_key(value: Any) -> tuple:
    """Numbers sort before strings, strings before everything else."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (2, repr(value))


class InMemoryBackend:
    """IdentityProvider and DocumentStore in a single object."""

    def __init__(self, identity: Optional[Identity] = None) -> None:
        self._lock = threading.RLock()
        self._accounts: dict[str, tuple[str, str]] = {}  # email -> (password, uid)
        self._current = identity
        # collection -> {doc_id: data}; dicts keep insertion order
        self._collections: dict[str, dict[str, Any]] = defaultdict(dict)
        self._observers: dict[str, list[tuple[object, Subscription, str, Callable, Callable]]] = (
            defaultdict(list)
        )
        self._faults: dict[str, Exception] = {}
        #: Every request that reached the backend, e.g. ("insert", "notes", {...})
        self.requests: list[tuple[Any, ...]] = []

    # ------------------------------------------------------------------
    # Test hooks
    # ------------------------------------------------------------------

    def fail_next(self, operation: str, exc: Exception) -> None:
        """Make the next call of *operation* raise *exc*."""
        with self._lock:
            self._faults[operation] = exc

    def put_raw(self, collection: str, doc_id: str, data: Any) -> None:
        """Write a document bypassing validation, then notify observers."""
        with self._lock:
            self._collections[collection][doc_id] = data
        self._publish(collection)

    def break_observers(self, collection: str, exc: Exception) -> None:
        """Report *exc* to every open live query on *collection*."""
        with self._lock:
            handlers = [
                on_error
                for _, sub, _, _, on_error in self._observers[collection]
                if sub.active
            ]
        for on_error in handlers:
            on_error(exc)

    def documents(self, collection: str) -> dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._collections[collection])

    def observer_count(self, collection: str) -> int:
        with self._lock:
            return len(self._observers[collection])

    # ------------------------------------------------------------------
    # IdentityProvider
    # ------------------------------------------------------------------

    def create_account(self, email: str, password: str) -> Identity:
        with self._lock:
            self._record("create_account", email)
            if not email or "@" not in email:
                raise AuthError("INVALID_EMAIL")
            if len(password) < 6:
                raise AuthError("WEAK_PASSWORD", "Password should be at least 6 characters")
            if email in self._accounts:
                raise AuthError("EMAIL_EXISTS")
            uid = uuid.uuid4().hex
            self._accounts[email] = (password, uid)
            self._current = self._identity(uid, email)
            return self._current

    def authenticate(self, email: str, password: str) -> Identity:
        with self._lock:
            self._record("authenticate", email)
            account = self._accounts.get(email)
            if account is None or account[0] != password:
                raise AuthError("INVALID_LOGIN_CREDENTIALS")
            self._current = self._identity(account[1], email)
            return self._current

    def end_session(self) -> None:
        with self._lock:
            self._record("end_session")
            self._current = None

    def current_identity(self) -> Optional[Identity]:
        return self._current

    # ------------------------------------------------------------------
    # DocumentStore
    # ------------------------------------------------------------------

    def insert(self, collection: str, record: dict[str, Any]) -> str:
        with self._lock:
            self._record("insert", collection, dict(record))
            doc_id = uuid.uuid4().hex[:20]
            self._collections[collection][doc_id] = dict(record)
        self._publish(collection)
        return doc_id

    def replace(self, collection: str, doc_id: str, record: dict[str, Any]) -> None:
        with self._lock:
            self._record("replace", collection, doc_id, dict(record))
            self._collections[collection][doc_id] = dict(record)
        self._publish(collection)

    def remove(self, collection: str, doc_id: str) -> None:
        with self._lock:
            self._record("remove", collection, doc_id)
            self._collections[collection].pop(doc_id, None)
        self._publish(collection)

    def observe(
        self,
        collection: str,
        order_field: str,
        on_snapshot: Callable[[Snapshot], None],
        on_error: Callable[[Exception], None],
    ) -> Subscription:
        with self._lock:
            try:
                self._record("observe", collection, order_field)
            except StoreError as exc:
                on_error(exc)
                dead = Subscription()
                dead.cancel()
                return dead
            token = object()
            sub = Subscription(lambda: self._drop_observer(collection, token))
            self._observers[collection].append((token, sub, order_field, on_snapshot, on_error))
            on_snapshot(self._snapshot(collection, order_field))
        return sub

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _record(self, operation: str, *args: Any) -> None:
        self.requests.append((operation, *args))
        exc = self._faults.pop(operation, None)
        if exc is not None:
            raise exc

    def _identity(self, uid: str, email: str) -> Identity:
        return Identity(uid=uid, email=email, id_token=f"token-{uuid.uuid4().hex}")

    def _snapshot(self, collection: str, order_field: str) -> Snapshot:
        docs = [
            (doc_id, copy.deepcopy(data))
            for doc_id, data in self._collections[collection].items()
            if isinstance(data, dict) and order_field in data
        ]
        docs.sort(key=lambda pair: _order_key(pair[1][order_field]))
        return docs

    def _publish(self, collection: str) -> None:
        # observers receive snapshots in write order
        with self._lock:
            for _, sub, order_field, on_snapshot, _ in list(self._observers[collection]):
                if sub.active:
                    on_snapshot(self._snapshot(collection, order_field))

    def _drop_observer(self, collection: str, token: object) -> None:
        with self._lock:
            self._observers[collection] = [
                entry for entry in self._observers[collection] if entry[0] is not token
            ]
