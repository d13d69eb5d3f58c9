# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Scrub credentials out of log messages before any sink sees them."""

from __future__ import annotations

import re
from typing import Any

REDACTED = "***REDACTED***"

_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    # session cookie value, wherever it shows up (Cookie / Set-Cookie dumps)
    (re.compile(r"(housing_session=)[^;\s]+"), rf"\g<1>{REDACTED}"),
    # any compact JWT
    (re.compile(r"\beyJ[\w-]+\.[\w-]+\.[\w-]+"), "***JWT***"),
    (re.compile(r"\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}"), "***BCRYPT***"),
    (
        re.compile(r"((?:password|secret|token)\w*\s*[:=]\s*['\"]?)[^'\",\s}]+", re.IGNORECASE),
        rf"\g<1>{REDACTED}",
    ),
    (re.compile(r"(://[^:/\s]+:)[^@\s]+@"), rf"\g<1>{REDACTED}@"),
    (
        re.compile(r"(contact_?phone\w*\s*[:=]\s*['\"]?)[+\d\s().-]{7,20}", re.IGNORECASE),
        rf"\g<1>{REDACTED}",
    ),
)


def sanitize_message(message: str) -> str:
    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    record["message"] = sanitize_message(record["message"])
    return True
