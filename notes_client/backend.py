"""Protocols for the two external collaborators: identity and documents."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, runtime_checkable

from notes_client.models import Identity
from notes_client.observable import Subscription

#: One delivered snapshot: ``(document id, raw document data)`` in query order.
Snapshot = list[tuple[str, Any]]


@runtime_checkable
class IdentityProvider(Protocol):
    """Authenticates credentials and keeps the local session.

    Implementations raise ``AuthError`` on failure.
    """

    def create_account(self, email: str, password: str) -> Identity:
        """Register a new account and return its identity."""
        ...

    def authenticate(self, email: str, password: str) -> Identity:
        """Check credentials and return the identity."""
        ...

    def end_session(self) -> None:
        """Forget the current identity."""
        ...

    def current_identity(self) -> Optional[Identity]:
        """Identity from the local session cache; never touches the network."""
        ...


@runtime_checkable
class DocumentStore(Protocol):
    """A remote collection-of-documents database with live queries.

    Write operations raise ``StoreError`` on failure.
    """

    def insert(self, collection: str, record: dict[str, Any]) -> str:
        """Add *record* under a store-assigned id and return the id."""
        ...

    def replace(self, collection: str, doc_id: str, record: dict[str, Any]) -> None:
        """Overwrite the whole document at *doc_id*."""
        ...

    def remove(self, collection: str, doc_id: str) -> None:
        """Delete the document at *doc_id*."""
        ...

    def observe(
        self,
        collection: str,
        order_field: str,
        on_snapshot: Callable[[Snapshot], None],
        on_error: Callable[[Exception], None],
    ) -> Subscription:
        """Open a live query ordered by *order_field* ascending.

        ``on_snapshot`` receives the full ordered result set on every change;
        cancelling the returned subscription closes the query.
        """
        ...
