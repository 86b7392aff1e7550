"""Seed the notes collection with sample notes.

Signs in (creating the account when it does not exist yet), writes a few
notes, waits for the live subscription to echo them back and prints the
title-ordered list.

Usage:
    python scripts/seed_data.py --email me@example.com --password secret123
    python scripts/seed_data.py --demo
"""

from __future__ import annotations

import argparse
import sys
import threading
from pathlib import Path

_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from notes_client.app import NotesApp  # noqa: E402
from notes_client.config import configure_logging, get_settings  # noqa: E402
from notes_client.exceptions import ConfigurationError  # noqa: E402

WAIT_SECONDS = 15

# (title, content)
NOTES: list[tuple[str, str]] = [
    ("Shopping list", "Eggs, milk, bread, coffee"),
    ("Meeting notes", "Ship the notes screen before Friday"),
    ("Books to read", "Designing Data-Intensive Applications; Fluent Python"),
    ("Ideas", "Offline mode, search, tags"),
    ("Packing", "Charger, passport, umbrella"),
]

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo-password"


def sign_in_or_up(app: NotesApp, email: str, password: str) -> bool:
    """Sign in, falling back to creating the account."""
    app.session.sign_in(email, password).result()
    if not app.signed_in:
        app.session.sign_up(email, password).result()
    return app.signed_in


def main() -> None:
    """Create the sample notes and print what the subscription delivers."""
    parser = argparse.ArgumentParser(description="Seed sample notes")
    parser.add_argument("--email", default=DEMO_EMAIL)
    parser.add_argument("--password", default=DEMO_PASSWORD)
    parser.add_argument(
        "--demo", action="store_true", help="Use the in-memory backend"
    )
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)
    try:
        app = NotesApp.for_environment(settings, demo=args.demo)
    except ConfigurationError as exc:
        parser.error(str(exc))

    try:
        if not sign_in_or_up(app, args.email, args.password):
            print(f"  FAIL: could not sign in: {app.session.last_error.value}")
            sys.exit(1)
        print(f"\n  Signed in as {args.email}")

        repository = app.open_notes()
        baseline = len(repository.notes.value)
        expected = baseline + len(NOTES)
        done = threading.Event()
        sub = repository.notes.subscribe(
            lambda notes: done.set() if len(notes) >= expected else None
        )

        for title, content in NOTES:
            repository.create(title, content).result()
            print(f"  Saved: {title}")

        if not done.wait(WAIT_SECONDS):
            print(f"  WARN: subscription did not catch up within {WAIT_SECONDS}s")
        sub.cancel()

        print("\n  Notes (ordered by title):")
        for note in repository.notes.value:
            print(f"    {note.id}  {note.title:<20} {note.content}")
        print()
    finally:
        app.close()


if __name__ == "__main__":
    main()
