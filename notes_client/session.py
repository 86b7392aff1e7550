"""Session controller: who is signed in, and the calls that change it."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Optional

from notes_client.backend import IdentityProvider
from notes_client.exceptions import NotesClientError
from notes_client.metrics import AUTH_OPERATIONS
from notes_client.models import Identity
from notes_client.observable import Observable

logger = logging.getLogger(__name__)


class SessionController:
    """Tracks the current identity and forwards auth calls to the provider.

    ``sign_up``, ``sign_in`` and ``sign_out`` return immediately with a
    ``Future``; the provider call runs on the executor and the observable
    state is updated before the future resolves. A failed call is logged,
    stored in ``last_error``, and leaves ``user`` untouched.
    """

    def __init__(
        self, provider: IdentityProvider, executor: Optional[Executor] = None
    ) -> None:
        self._provider = provider
        self._owns_executor = executor is None
        # one worker keeps calls in submission order
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="session"
        )

        identity = provider.current_identity()
        self.user: Observable[Optional[Identity]] = Observable(identity, "session.user")
        self.is_signed_in: Observable[bool] = Observable(
            identity is not None, "session.is_signed_in"
        )
        self.last_error: Observable[Optional[Exception]] = Observable(
            None, "session.last_error"
        )
        if identity is not None:
            logger.info("Restored session for %s", identity.email or identity.uid)

    @property
    def signed_in(self) -> bool:
        return self.is_signed_in.value

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def sign_up(self, email: str, password: str) -> Future:
        """Create an account and sign in as it."""
        return self._executor.submit(
            self._run, "sign_up", lambda: self._provider.create_account(email, password)
        )

    def sign_in(self, email: str, password: str) -> Future:
        return self._executor.submit(
            self._run, "sign_in", lambda: self._provider.authenticate(email, password)
        )

    def sign_out(self) -> Future:
        return self._executor.submit(
            self._run, "sign_out", lambda: self._provider.end_session()
        )

    def close(self) -> None:
        """Wait for in-flight calls and release the executor if we own it."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run(
        self, operation: str, call: Callable[[], Optional[Identity]]
    ) -> Optional[Identity]:
        try:
            identity = call()
        except NotesClientError as exc:
            AUTH_OPERATIONS.labels(operation=operation, status="error").inc()
            logger.error("Error during %s: %s", operation, exc)
            self.last_error.set(exc)
            return None

        AUTH_OPERATIONS.labels(operation=operation, status="success").inc()
        self.last_error.set(None)
        self.user.set(identity)
        self.is_signed_in.set(identity is not None)
        if identity is not None:
            logger.info("%s succeeded for %s", operation, identity.email or identity.uid)
        else:
            logger.info("Signed out")
        return identity
