"""
Paste schemas.

PasteResponse is the single read shape for pastes. It has no field for the
password hash; protected pastes read without the right password carry an
empty content and ``is_protected=True``.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from pasteit.models.enums import Visibility
from pasteit.models.paste import Paste


class PasteCreate(BaseModel):
    """
    Options for creating a paste.

    Content emptiness is checked by the service so that the same rule applies
    to every caller.
    """

    title: str | None = Field(default=None, max_length=255)
    content: str = Field(default="")
    syntax: str = Field(default="plaintext", min_length=1, max_length=50)
    visibility: Visibility = Field(default=Visibility.public)
    expires_at: datetime | None = None
    password: str | None = Field(default=None, max_length=128)
    tags: list[str] = Field(default_factory=list)


class PasteUpdate(BaseModel):
    """
    Partial paste update.

    Extra keys are accepted and later stripped by the service's allow-list.
    """

    model_config = ConfigDict(extra="allow")

    title: str | None = Field(default=None, max_length=255)
    content: str | None = None
    syntax: str | None = Field(default=None, min_length=1, max_length=50)
    visibility: Visibility | None = None
    expires_at: datetime | None = None
    password: str | None = Field(default=None, max_length=128)
    tags: list[str] | None = None


class PasteUnlock(BaseModel):
    """Body of read requests for protected pastes."""

    password: str | None = None


class PasteResponse(BaseModel):
    """Paste as returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    short_id: str
    title: str | None = None
    content: str
    syntax: str
    visibility: Visibility
    created_at: datetime
    updated_at: datetime | None = None
    expires_at: datetime | None = None
    owner_id: uuid.UUID | None = None
    views: int
    tags: list[str]
    is_protected: bool

    @classmethod
    def from_paste(cls, paste: Paste, reveal_content: bool = True) -> "PasteResponse":
        """
        Build a response from a model instance.

        Args:
            paste: Loaded paste
            reveal_content: When False, content is replaced by an empty string
        """
        response = cls.model_validate(paste)
        if not reveal_content:
            response.content = ""
        return response

    @classmethod
    def for_listing(cls, paste: Paste) -> "PasteResponse":
        """Listing view: content of protected pastes is never included."""
        return cls.from_paste(paste, reveal_content=not paste.is_protected)


class SweepResponse(BaseModel):
    """Result of an expiry sweep."""

    swept: int = Field(description="Pastes newly flagged as deleted")
