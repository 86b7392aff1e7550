"""Unit tests for notes_client.session — the session controller."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from unittest.mock import MagicMock, patch

from notes_client.exceptions import AuthError
from notes_client.firebase_auth import FirebaseAuthProvider, SessionCache
from notes_client.memory import InMemoryBackend
from notes_client.models import Identity
from notes_client.session import SessionController

EMAIL = "ada@example.com"
PASSWORD = "correct-horse"


# ---------------------------------------------------------------------------
# Start-up
# ---------------------------------------------------------------------------


class TestInitialState:
    def test_signed_out_without_cached_identity(self, session: SessionController) -> None:
        assert session.user.value is None
        assert session.is_signed_in.value is False

    def test_restores_cached_identity_without_requests(self) -> None:
        identity = Identity(uid="u1", email=EMAIL)
        backend = InMemoryBackend(identity=identity)
        controller = SessionController(backend)
        try:
            assert controller.user.value == identity
            assert controller.signed_in is True
            assert backend.requests == []
        finally:
            controller.close()


# ---------------------------------------------------------------------------
# Sign-up / sign-in
# ---------------------------------------------------------------------------


class TestSignUp:
    def test_success_sets_user(self, session: SessionController) -> None:
        identity = session.sign_up(EMAIL, PASSWORD).result()
        assert identity is not None
        assert session.user.value == identity
        assert session.is_signed_in.value is True
        assert session.last_error.value is None

    def test_existing_account_leaves_state(
        self, session: SessionController, backend: InMemoryBackend, caplog
    ) -> None:
        backend.create_account(EMAIL, PASSWORD)
        backend.end_session()

        with caplog.at_level(logging.ERROR):
            result = session.sign_up(EMAIL, PASSWORD).result()

        assert result is None
        assert session.user.value is None
        assert session.is_signed_in.value is False
        assert isinstance(session.last_error.value, AuthError)
        assert session.last_error.value.code == "EMAIL_EXISTS"
        assert "sign_up" in caplog.text

    def test_empty_credentials_passed_through(
        self, session: SessionController, backend: InMemoryBackend
    ) -> None:
        session.sign_up("", "").result()
        assert ("create_account", "") in backend.requests
        assert session.signed_in is False


class TestSignIn:
    def test_success(self, session: SessionController, backend: InMemoryBackend) -> None:
        backend.create_account(EMAIL, PASSWORD)
        backend.end_session()

        identity = session.sign_in(EMAIL, PASSWORD).result()

        assert identity.email == EMAIL
        assert session.signed_in is True

    def test_wrong_password(self, session: SessionController, backend: InMemoryBackend) -> None:
        backend.create_account(EMAIL, PASSWORD)
        backend.end_session()

        session.sign_in(EMAIL, "wrong").result()

        assert session.signed_in is False
        assert session.last_error.value.code == "INVALID_LOGIN_CREDENTIALS"

    def test_success_clears_previous_error(
        self, session: SessionController, backend: InMemoryBackend
    ) -> None:
        backend.create_account(EMAIL, PASSWORD)
        backend.end_session()
        session.sign_in(EMAIL, "wrong").result()
        assert session.last_error.value is not None

        session.sign_in(EMAIL, PASSWORD).result()

        assert session.last_error.value is None


# ---------------------------------------------------------------------------
# Sign-out
# ---------------------------------------------------------------------------


class TestSignOut:
    def test_sign_up_then_sign_out(self, session: SessionController) -> None:
        """Issued back to back, without waiting in between."""
        session.sign_up(EMAIL, PASSWORD)
        session.sign_out().result()

        assert session.is_signed_in.value is False
        assert session.user.value is None

    def test_failure_keeps_user(
        self, session: SessionController, backend: InMemoryBackend
    ) -> None:
        identity = session.sign_up(EMAIL, PASSWORD).result()
        backend.fail_next("end_session", AuthError("SIGN_OUT_FAILED", "disk full"))

        session.sign_out().result()

        assert session.user.value == identity
        assert session.signed_in is True
        assert session.last_error.value.code == "SIGN_OUT_FAILED"


# ---------------------------------------------------------------------------
# Failures inside the REST provider
# ---------------------------------------------------------------------------


def _ok_response(payload: object) -> MagicMock:
    resp = MagicMock()
    resp.status_code = 200
    resp.ok = True
    resp.json.return_value = payload
    return resp


class TestProviderFailures:
    def test_unwritable_session_cache_reported(self, tmp_path: Path, caplog) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        provider = FirebaseAuthProvider("api-key", SessionCache(blocker / "session.json"))
        controller = SessionController(provider)
        payload = {"localId": "u1", "email": EMAIL, "idToken": "t", "refreshToken": "r"}
        try:
            with (
                patch(
                    "notes_client.firebase_auth.requests.post",
                    return_value=_ok_response(payload),
                ),
                caplog.at_level(logging.ERROR),
            ):
                result = controller.sign_in(EMAIL, PASSWORD).result()
        finally:
            controller.close()

        assert result is None
        assert controller.user.value is None
        assert controller.last_error.value.code == "SESSION_CACHE_FAILED"
        assert "Error during sign_in" in caplog.text

    def test_non_object_response_reported(self, tmp_path: Path) -> None:
        provider = FirebaseAuthProvider("api-key", SessionCache(tmp_path / "session.json"))
        controller = SessionController(provider)
        try:
            with patch(
                "notes_client.firebase_auth.requests.post",
                return_value=_ok_response("unexpected"),
            ):
                result = controller.sign_up(EMAIL, PASSWORD).result()
        finally:
            controller.close()

        assert result is None
        assert controller.last_error.value.code == "INVALID_RESPONSE"


# ---------------------------------------------------------------------------
# Asynchrony and observers
# ---------------------------------------------------------------------------


class TestAsync:
    def test_calls_return_before_provider_finishes(self) -> None:
        release = threading.Event()
        provider = MagicMock()
        provider.current_identity.return_value = None

        def slow_authenticate(email: str, password: str) -> Identity:
            release.wait(5)
            return Identity(uid="u1", email=email)

        provider.authenticate.side_effect = slow_authenticate
        controller = SessionController(provider)
        try:
            future = controller.sign_in(EMAIL, PASSWORD)
            assert future.done() is False
            assert controller.signed_in is False

            release.set()
            future.result(timeout=5)
            assert controller.signed_in is True
        finally:
            release.set()
            controller.close()

    def test_observers_see_transitions(self, session: SessionController) -> None:
        seen: list[bool] = []
        session.is_signed_in.subscribe(seen.append)

        session.sign_up(EMAIL, PASSWORD)
        session.sign_out().result()

        assert seen == [False, True, False]
