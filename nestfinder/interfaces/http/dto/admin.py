from __future__ import annotations

from pydantic import Field, field_validator

from .common import CamelModel, check_password_length, require_text


class CreateUserRequestDTO(CamelModel):
    username: str = Field(max_length=64)
    password: str = Field(min_length=1, max_length=128)
    display_name: str | None = Field(default=None, max_length=128)
    is_admin: bool = False

    @field_validator("username")
    @classmethod
    def _username(cls, value: str) -> str:
        return require_text(value, "username")

    @field_validator("password")
    @classmethod
    def _password(cls, value: str) -> str:
        return check_password_length(value)


class UpdateUserRequestDTO(CamelModel):
    display_name: str | None = Field(default=None, min_length=1, max_length=128)
    is_admin: bool | None = None
    password: str | None = Field(default=None, max_length=128)

    @field_validator("password")
    @classmethod
    def _password(cls, value: str | None) -> str | None:
        return check_password_length(value) if value else value
