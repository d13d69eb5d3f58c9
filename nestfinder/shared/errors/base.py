# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, ClassVar


@dataclass(eq=False)
class AppError(Exception):
    code: str
    status: HTTPStatus
    message: str | None = None
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message or self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message or self.code, "code": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    """Base for errors raised by handlers with a fixed code/status/message."""

    default_code: ClassVar[str] = "domain_error"
    default_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_REQUEST
    default_message: ClassVar[str | None] = None

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code or self.default_code,
            status=status or self.default_status,
            message=message or self.default_message,
            context=context,
        )


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(
            code=code,
            status=resolved_status,
            message="Internal server error",
            context=context,
        )


class ValidationError(AppError):
    def __init__(
        self,
        message: str = "Invalid request",
        *,
        code: str = "validation_error",
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.BAD_REQUEST,
            message=message,
            context=context,
        )


class AuthenticationRequiredError(DomainError):
    default_code = "unauthorized"
    default_status = HTTPStatus.UNAUTHORIZED
    default_message = "Unauthorized"


class ForbiddenError(DomainError):
    default_code = "forbidden"
    default_status = HTTPStatus.FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(DomainError):
    default_code = "not_found"
    default_status = HTTPStatus.NOT_FOUND
    default_message = "Not found"


class ConflictError(DomainError):
    default_code = "conflict"
    default_status = HTTPStatus.CONFLICT
    default_message = "Conflict"


class ListingNotFoundError(NotFoundError):
    default_code = "listing_not_found"
    default_message = "Listing not found"

    def __init__(self, listing_id: str) -> None:
        super().__init__(context={"listing_id": listing_id})


class ViewingNotFoundError(NotFoundError):
    default_code = "viewing_not_found"
    default_message = "Viewing not found"

    def __init__(self, viewing_id: str) -> None:
        super().__init__(context={"viewing_id": viewing_id})


class NoteNotFoundError(NotFoundError):
    default_code = "note_not_found"
    default_message = "Note not found"

    def __init__(self, note_id: str) -> None:
        super().__init__(context={"note_id": note_id})


class ScoreNotFoundError(NotFoundError):
    default_code = "score_not_found"
    default_message = "Score not found"

    def __init__(self, score_id: str) -> None:
        super().__init__(context={"score_id": score_id})


class TodoNotFoundError(NotFoundError):
    default_code = "todo_not_found"
    default_message = "Todo not found"

    def __init__(self, todo_id: str) -> None:
        super().__init__(context={"todo_id": todo_id})


class InvalidUploadError(ValidationError):
    """Rejected photo upload; the message names the offending type or file."""

    def __init__(self, message: str, *, code: str = "invalid_upload") -> None:
        super().__init__(message, code=code)
