# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Security event trail: each event is logged and kept in the audit_logs table.

Events are written in their own transaction, so call ``audit_log`` outside any
open ``session_scope`` (SQLite would make the second writer wait).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from nestfinder.infrastructure.db import session_scope
from nestfinder.infrastructure.db.models import AuditLog
from nestfinder.shared.logging import logger

MAX_DETAILS_CHARS = 2048
_SECRET_KEY_PARTS = ("password", "token", "secret", "phone", "cookie", "hash")


class AuditAction(str, Enum):
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    PASSWORD_CHANGED = "password_changed"

    USER_CREATED = "user_created"
    USER_UPDATED = "user_updated"
    USER_DELETED = "user_deleted"


@dataclass(slots=True)
class AuditEvent:
    action: AuditAction
    user_id: str | None
    ip_address: str | None
    success: bool
    details: dict[str, Any] = field(default_factory=dict)
    at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        self.details = {
            key: "***REDACTED***" if any(part in key.lower() for part in _SECRET_KEY_PARTS) else value
            for key, value in self.details.items()
        }

    def summary(self) -> str:
        line = f"audit {self.action.value} user={self.user_id} ip={self.ip_address} ok={self.success}"
        return f"{line} {self.details}" if self.details else line

    def to_row(self) -> AuditLog:
        encoded = json.dumps(self.details, default=str)[:MAX_DETAILS_CHARS] if self.details else None
        return AuditLog(
            timestamp=self.at,
            action=self.action.value,
            user_id=self.user_id,
            ip_address=self.ip_address,
            success=self.success,
            details_json=encoded,
        )


def audit_log(
    action: AuditAction,
    user_id: str | None = None,
    ip_address: str | None = None,
    details: dict[str, Any] | None = None,
    success: bool = True,
) -> AuditEvent:
    event = AuditEvent(action, user_id, ip_address, success, dict(details or {}))
    (logger.info if success else logger.warning)(event.summary())
    try:
        with session_scope() as session:
            session.add(event.to_row())
    except SQLAlchemyError as exc:
        logger.error(f"audit: could not persist {action.value} ({type(exc).__name__})")
    return event


__all__ = ["AuditAction", "AuditEvent", "audit_log"]
