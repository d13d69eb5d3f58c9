from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from nestfinder.domain.listings import SCORE_MAX, SCORE_MIN, ListingStatus

from .common import CamelModel, require_text

Score = float | None


class ListingFieldsDTO(CamelModel):
    description: str | None = None
    url: str | None = None
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    price: int | None = Field(default=None, ge=0)
    bedrooms: int | None = Field(default=None, ge=0)
    bathrooms: int | None = Field(default=None, ge=0)
    pet_friendly: bool | None = None
    square_feet: int | None = Field(default=None, ge=0)
    contact_phone: str | None = None
    parking: str | None = None
    laundry: str | None = None
    year_built: int | None = None
    available_date: str | None = None
    neighbourhood: str | None = None
    photos: list[str] | None = None
    scraped_content: str | None = None
    notes: str | None = None


class ListingCreateDTO(ListingFieldsDTO):
    title: str

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        return require_text(value, "title")


class ListingUpdateDTO(ListingFieldsDTO):
    title: str | None = None
    status: ListingStatus | None = None

    @field_validator("title")
    @classmethod
    def _title(cls, value: str | None) -> str:
        return require_text(value, "title")

    @field_validator("status")
    @classmethod
    def _status(cls, value: ListingStatus | None) -> ListingStatus:
        if value is None:
            raise ValueError("status is required")
        return value


class ScoreUpsertDTO(CamelModel):
    ai_overall_score: Score = Field(default=None, ge=SCORE_MIN, le=SCORE_MAX)
    ai_breakdown: dict[str, Any] | None = None
    ai_summary: str | None = None
    manual_override_score: Score = Field(default=None, ge=SCORE_MIN, le=SCORE_MAX)


class ScoreOverrideDTO(CamelModel):
    manual_override_score: Score = Field(default=None, ge=SCORE_MIN, le=SCORE_MAX)
