from __future__ import annotations

from pydantic import Field, field_validator

from nestfinder.domain.users.entities import User
from nestfinder.services.serializers import iso

from .common import CamelModel, check_password_length, require_text


class LoginRequestDTO(CamelModel):
    username: str = Field(max_length=64)
    password: str = Field(max_length=128)

    @field_validator("username")
    @classmethod
    def _username(cls, value: str) -> str:
        return require_text(value, "username")

    @field_validator("password")
    @classmethod
    def _password(cls, value: str) -> str:
        if not value:
            raise ValueError("password is required")
        return value


class ChangePasswordRequestDTO(CamelModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=8, max_length=128)

    @field_validator("new_password")
    @classmethod
    def _new_password(cls, value: str) -> str:
        return check_password_length(value)


def session_user_payload(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "displayName": user.display_name,
        "isAdmin": user.is_admin,
        "onboardingComplete": user.onboarding_complete,
    }


def admin_user_payload(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "displayName": user.display_name,
        "isAdmin": user.is_admin,
        "createdAt": iso(user.created_at),
        "onboardingComplete": user.onboarding_complete,
    }
