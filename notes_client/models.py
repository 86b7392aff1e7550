"""Pydantic models for notes and the signed-in identity."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class DraftNote(BaseModel):
    """A note that has never been written to the store.

    Drafts carry no id; update and delete treat them as no-ops.
    """

    title: str = Field("", description="Note title")
    content: str = Field("", description="Note content")

    def to_record(self) -> dict[str, Any]:
        """Wire body sent to the document store."""
        return {"title": self.title, "content": self.content}


class Note(BaseModel):
    """A persisted note, as observed through the live subscription."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Store-assigned document id")
    title: str = Field(..., description="Note title")
    content: str = Field(..., description="Note content")

    @classmethod
    def from_document(cls, doc_id: str, data: Any) -> "Note":
        """Map a raw store document to a Note.

        Raises pydantic.ValidationError when the document lacks a string
        title or content. Unknown fields are ignored.
        """
        if not isinstance(data, dict):
            data = {}
        return cls.model_validate(
            {"title": data.get("title"), "content": data.get("content"), "id": doc_id}
        )

    def to_record(self) -> dict[str, Any]:
        """Wire body sent to the document store; the id is the document key."""
        return {"title": self.title, "content": self.content}

    def with_changes(self, **changes: Any) -> "Note":
        """Return a copy with the given fields replaced."""
        return self.model_copy(update=changes)


AnyNote = Union[Note, DraftNote]


class Identity(BaseModel):
    """The authenticated user returned by the identity provider."""

    uid: str
    email: str = ""
    id_token: str = ""
    refresh_token: str = ""
    expires_at: Optional[datetime] = Field(None, description="UTC expiry of id_token")
