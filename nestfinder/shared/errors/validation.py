# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    errors_list = []
    fields_set = set()

    for error in exc.errors():
        loc = error.get("loc", ())
        field_path = ".".join(str(part) for part in loc if part is not None)

        if field_path:
            fields_set.add(field_path)

        errors_list.append(
            {
                "field": field_path or "unknown",
                "type": error.get("type", "value_error"),
                "message": error.get("msg", ""),
            }
        )

    return {
        "fields": sorted(fields_set),
        "errors": errors_list,
    }


def first_error_message(exc: PydanticValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()) if part is not None)
    msg = str(first.get("msg", "invalid value"))
    # "Value error, budgetMin must be <= budgetMax" -> "budgetMin must be <= budgetMax"
    if msg.startswith("Value error, "):
        return msg[len("Value error, "):]
    if first.get("type") == "missing":
        return f"{loc} is required" if loc else "Missing required field"
    return f"{loc}: {msg}" if loc else msg


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    context = format_pydantic_errors(exc)
    raise ValidationError(first_error_message(exc), context=context) from exc


__all__ = [
    "first_error_message",
    "format_pydantic_errors",
    "raise_validation_error",
]
