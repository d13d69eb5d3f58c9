# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from nestfinder.domain.exceptions import DomainError as _PlainDomainError
from nestfinder.shared.errors.base import DomainError


class UserAlreadyExistsError(DomainError):
    default_code = "user_already_exists"
    default_status = HTTPStatus.CONFLICT
    default_message = "Username already exists"


class InvalidCredentialsError(DomainError):
    default_code = "invalid_credentials"
    default_status = HTTPStatus.UNAUTHORIZED
    default_message = "Invalid credentials"


class UserNotFoundError(DomainError):
    default_code = "user_not_found"
    default_status = HTTPStatus.NOT_FOUND
    default_message = "User not found"


class CannotDeleteSelfError(DomainError):
    default_code = "cannot_delete_self"
    default_status = HTTPStatus.BAD_REQUEST
    default_message = "Cannot delete your own account"


class HashFormatError(_PlainDomainError):
    """Stored digest could not be parsed by the hashing primitive."""
