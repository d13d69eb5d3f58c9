# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import TypeVar

from flask import request
from pydantic import BaseModel, ValidationError

from nestfinder.services.photos_service import PhotoUpload
from nestfinder.shared.errors.validation import raise_validation_error

DTO = TypeVar("DTO", bound=BaseModel)


def parse_body(dto_cls: type[DTO]) -> DTO:  # noqa: UP047
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    try:
        return dto_cls.model_validate(payload)
    except ValidationError as exc:
        raise_validation_error(exc)


def photo_uploads(field: str = "photos") -> list[PhotoUpload]:
    return [
        PhotoUpload(
            filename=file.filename or "upload",
            content_type=file.mimetype or "",
            data=file.read(),
        )
        for file in request.files.getlist(field)
    ]
