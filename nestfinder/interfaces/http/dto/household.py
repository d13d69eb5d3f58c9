"""Preferences, budget, area and todo request bodies."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from .common import CamelModel, require_text


class CustomDesireDTO(BaseModel):
    label: str
    enabled: bool = True


class PreferencesDTO(CamelModel):
    natural_light: bool = False
    bedrooms_min: int = Field(ge=0)
    bedrooms_max: int = Field(ge=0)
    outdoors_access: bool = False
    public_transport: bool = False
    budget_min: int = Field(ge=0)
    budget_max: int = Field(ge=0)
    pet_friendly: bool = False
    move_in_date_start: datetime | None = None
    move_in_date_end: datetime | None = None
    laundry_in_unit: bool = False
    parking: bool = False
    quiet_neighbourhood: bool = False
    modern_finishes: bool = False
    storage_space: bool = False
    gym_amenities: bool = False
    custom_desires: list[CustomDesireDTO] = Field(default_factory=list)

    @model_validator(mode="after")
    def _ranges(self) -> PreferencesDTO:
        if self.budget_min > self.budget_max:
            raise ValueError("budgetMin must be <= budgetMax")
        if self.bedrooms_min > self.bedrooms_max:
            raise ValueError("bedroomsMin must be <= bedroomsMax")
        return self


class BudgetUpdateDTO(CamelModel):
    annual_salary: float | None = None

    @field_validator("annual_salary", mode="before")
    @classmethod
    def _number(cls, value: object) -> object:
        if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
            raise ValueError("annualSalary must be a number")
        if value is not None and value < 0:
            raise ValueError("annualSalary must not be negative")
        return value


class AreaNoteDTO(CamelModel):
    area_name: str
    liked: str | None = None
    disliked: str | None = None

    @field_validator("area_name")
    @classmethod
    def _area(cls, value: str) -> str:
        return require_text(value, "areaName")


class DismissAreaDTO(CamelModel):
    area_name: str
    reason: str | None = None

    @field_validator("area_name")
    @classmethod
    def _area(cls, value: str) -> str:
        return require_text(value, "areaName")


class TodoCreateDTO(CamelModel):
    title: str
    scheduled_at: datetime
    description: str | None = None
    duration_min: int = Field(default=30, ge=1)
    location: str | None = None
    link: str | None = None

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        return require_text(value, "title")


class TodoUpdateDTO(CamelModel):
    title: str | None = None
    description: str | None = None
    scheduled_at: datetime | None = None
    duration_min: int | None = Field(default=None, ge=1)
    location: str | None = None
    link: str | None = None
    completed: bool | None = None

    @field_validator("title")
    @classmethod
    def _title(cls, value: str | None) -> str:
        return require_text(value, "title")
