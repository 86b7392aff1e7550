"""Shared fixtures: an in-memory backend and controllers bound to it."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from notes_client.memory import InMemoryBackend
from notes_client.notes import NotesRepository
from notes_client.session import SessionController


@pytest.fixture()
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture()
def repository(backend: InMemoryBackend) -> Iterator[NotesRepository]:
    """A NotesRepository over the in-memory store, closed after the test."""
    repo = NotesRepository(backend)
    yield repo
    repo.close()


@pytest.fixture()
def session(backend: InMemoryBackend) -> Iterator[SessionController]:
    controller = SessionController(backend)
    yield controller
    controller.close()
