from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import field_validator

from .common import CamelModel, require_text

ViewingStatus = Literal["SCHEDULED", "COMPLETED", "CANCELLED"]


class ViewingCreateDTO(CamelModel):
    listing_id: str
    scheduled_at: datetime
    notes: str | None = None

    @field_validator("listing_id")
    @classmethod
    def _listing_id(cls, value: str) -> str:
        return require_text(value, "listingId")


class ViewingUpdateDTO(CamelModel):
    listing_id: str | None = None
    scheduled_at: datetime | None = None
    notes: str | None = None
    status: ViewingStatus | None = None


class NoteCreateDTO(CamelModel):
    title: str
    notes: str | None = None

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        return require_text(value, "title")


class NoteUpdateDTO(CamelModel):
    title: str | None = None
    notes: str | None = None

    @field_validator("title")
    @classmethod
    def _title(cls, value: str | None) -> str:
        return require_text(value, "title")
