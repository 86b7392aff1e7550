"""Sign-in page: email and password with Sign In / Sign Up buttons."""

from __future__ import annotations

import streamlit as st

from notes_client.app import NotesApp
from notes_client.exceptions import AuthError

# Provider codes worth a friendlier message
_MESSAGES: dict[str, str] = {
    "EMAIL_EXISTS": "An account with this email already exists.",
    "INVALID_EMAIL": "That email address is not valid.",
    "WEAK_PASSWORD": "Password should be at least 6 characters.",
    "INVALID_LOGIN_CREDENTIALS": "Wrong email or password.",
    "INVALID_PASSWORD": "Wrong email or password.",
    "EMAIL_NOT_FOUND": "Wrong email or password.",
    "NETWORK_ERROR": "Cannot reach Firebase. Check your connection.",
    "SESSION_CACHE_FAILED": "Signed in, but the session could not be saved on this machine.",
}


def error_message(exc: Exception) -> str:
    """Human-readable text for a failed auth call."""
    if isinstance(exc, AuthError):
        return _MESSAGES.get(exc.code, exc.message)
    return str(exc)


def render(app: NotesApp) -> None:
    """Render the sign-in form."""
    st.title("📝 Notes")

    email = st.text_input("Email", key="login_email")
    password = st.text_input("Password", type="password", key="login_password")

    col_in, col_up = st.columns(2)
    sign_in = col_in.button("Sign In", use_container_width=True)
    sign_up = col_up.button("Sign Up", use_container_width=True)

    if sign_in or sign_up:
        action = app.session.sign_in if sign_in else app.session.sign_up
        with st.spinner("Signing in..." if sign_in else "Creating account..."):
            action(email, password).result()
        if app.signed_in:
            st.rerun()

    last_error = app.session.last_error.value
    if last_error is not None:
        st.error(error_message(last_error))
