"""Firebase Authentication over the Identity Toolkit REST API.

Email/password sign-up and sign-in go to the network; the signed-in
identity is kept in a local JSON session cache so that the next start-up
can restore it without a round-trip. Sign-out only clears the cache, which
is what the Firebase client SDKs do as well.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional

import requests
from pydantic import ValidationError

from notes_client.config import Settings
from notes_client.exceptions import AuthError
from notes_client.models import Identity

logger = logging.getLogger(__name__)

SIGN_UP_ENDPOINT = "accounts:signUp"
SIGN_IN_ENDPOINT = "accounts:signInWithPassword"
TOKEN_URL = "https://securetoken.googleapis.com/v1/token"


class SessionCache:
    """Persists the signed-in identity in a local JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[Identity]:
        """Return the cached identity, or None. A corrupt file counts as none."""
        if not self._path.exists():
            return None
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return Identity.model_validate(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            logger.error("Ignoring unreadable session cache %s: %s", self._path, exc)
            return None

    def save(self, identity: Identity) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(identity.model_dump_json(indent=2), encoding="utf-8")

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


class FirebaseAuthProvider:
    """IdentityProvider backed by Firebase Auth email/password accounts."""

    def __init__(
        self,
        api_key: str,
        cache: SessionCache,
        *,
        base_url: str = "https://identitytoolkit.googleapis.com/v1",
        token_url: str = TOKEN_URL,
        timeout: float = 10.0,
    ) -> None:
        self._api_key = api_key
        self._cache = cache
        self._base_url = base_url.rstrip("/")
        self._token_url = token_url
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "FirebaseAuthProvider":
        return cls(
            settings.firebase_api_key,
            SessionCache(settings.session_cache_path),
            base_url=settings.auth_base_url,
            token_url=settings.token_url,
            timeout=settings.request_timeout,
        )

    # ------------------------------------------------------------------
    # IdentityProvider
    # ------------------------------------------------------------------

    def create_account(self, email: str, password: str) -> Identity:
        """POST accounts:signUp — register and sign in a new user."""
        return self._password_request(SIGN_UP_ENDPOINT, email, password)

    def authenticate(self, email: str, password: str) -> Identity:
        """POST accounts:signInWithPassword — sign in an existing user."""
        return self._password_request(SIGN_IN_ENDPOINT, email, password)

    def end_session(self) -> None:
        try:
            self._cache.clear()
        except OSError as exc:
            raise AuthError("SIGN_OUT_FAILED", str(exc)) from exc

    def current_identity(self) -> Optional[Identity]:
        return self._cache.load()

    # ------------------------------------------------------------------
    # Token refresh
    # ------------------------------------------------------------------

    def refresh(self, identity: Identity) -> Identity:
        """Exchange the identity's refresh token for a fresh ID token.

        The new identity replaces the cached one, so the next start-up
        restores the refreshed session.
        """
        if not identity.refresh_token:
            raise AuthError("TOKEN_EXPIRED", "no refresh token for this session")
        data = self._request(
            self._token_url,
            data={"grant_type": "refresh_token", "refresh_token": identity.refresh_token},
        )
        refreshed = identity.model_copy(
            update={
                "id_token": data.get("id_token", ""),
                "refresh_token": data.get("refresh_token") or identity.refresh_token,
                "expires_at": _expiry(data.get("expires_in")),
            }
        )
        if not refreshed.id_token or refreshed.expires_at is None:
            raise AuthError("INVALID_RESPONSE", "response carried no id_token or expires_in")
        self._save(refreshed)
        logger.info("Refreshed ID token for %s", refreshed.email or refreshed.uid)
        return refreshed

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _password_request(self, endpoint: str, email: str, password: str) -> Identity:
        data = self._request(
            f"{self._base_url}/{endpoint}",
            json={"email": email, "password": password, "returnSecureToken": True},
        )
        identity = Identity(
            uid=data.get("localId", ""),
            email=data.get("email", email),
            id_token=data.get("idToken", ""),
            refresh_token=data.get("refreshToken", ""),
            expires_at=_expiry(data.get("expiresIn")),
        )
        if not identity.uid:
            raise AuthError("INVALID_RESPONSE", "response carried no localId")
        self._save(identity)
        return identity

    def _save(self, identity: Identity) -> None:
        try:
            self._cache.save(identity)
        except OSError as exc:
            raise AuthError("SESSION_CACHE_FAILED", str(exc)) from exc

    def _request(self, url: str, **body: Any) -> dict[str, Any]:
        try:
            resp = requests.post(
                url,
                params={"key": self._api_key},
                timeout=self._timeout,
                **body,
            )
        except requests.RequestException as exc:
            raise AuthError("NETWORK_ERROR", str(exc)) from exc

        if not resp.ok:
            raise _error_from_response(resp)
        try:
            data = resp.json()
        except ValueError as exc:
            raise AuthError("INVALID_RESPONSE", "response was not JSON") from exc
        if not isinstance(data, dict):
            raise AuthError("INVALID_RESPONSE", "response was not a JSON object")
        return data


def _expiry(expires_in: Any) -> Optional[datetime]:
    """``expiresIn`` is a count of seconds, sent as a string."""
    try:
        seconds = int(expires_in)
    except (TypeError, ValueError):
        return None
    return datetime.now(timezone.utc) + timedelta(seconds=seconds)


def _error_from_response(resp: requests.Response) -> AuthError:
    """Turn a Firebase error payload into an AuthError.

    Firebase reports ``{"error": {"message": "WEAK_PASSWORD : Password
    should be at least 6 characters"}}``; the part before `` : `` is the code.
    """
    try:
        message = resp.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return AuthError(f"HTTP_{resp.status_code}", resp.text[:200])
    code, _, detail = str(message).partition(" : ")
    return AuthError(code.strip(), detail.strip())
