# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import wraps

from flask import current_app, g, request

from nestfinder.domain.users.entities import IdentityClaim
from nestfinder.domain.users.repositories import SessionTokenCodec
from nestfinder.infrastructure.db import session_scope
from nestfinder.shared.errors import AuthenticationRequiredError, ForbiddenError
from nestfinder.shared.logging import logger

from .gate import AUTH_EXTENSION_KEY, bind_identity
from .session_cookie import SessionCookie


def _auth_components() -> tuple[SessionTokenCodec, SessionCookie]:
    return current_app.extensions[AUTH_EXTENSION_KEY]


def session_cookie() -> SessionCookie:
    return _auth_components()[1]


def verify_request_identity() -> IdentityClaim | None:
    """Re-verify the session cookie of the current request.

    Independent of the gate: handlers never rely on identity set upstream.
    """
    codec, cookie = _auth_components()
    token = cookie.read(request)
    if not token:
        return None
    return codec.verify(token)


def current_claim() -> IdentityClaim:
    return IdentityClaim(user_id=g.user_id, username=g.username, is_admin=g.is_admin)


def _require_identity(*, admin: bool) -> IdentityClaim:
    claim = verify_request_identity()
    if claim is None:
        logger.warning(f"Auth failed (no valid session) on {request.method} {request.path}")
        raise AuthenticationRequiredError()
    if admin and not claim.is_admin:
        logger.warning(
            f"Admin access denied for user={claim.user_id} on {request.method} {request.path}"
        )
        raise ForbiddenError()
    bind_identity(claim)
    return claim


def auth_required(f):
    """Verify the session and pass an open transactional ``db`` session to the handler."""

    @wraps(f)
    def inner(*a, **kw):
        claim = _require_identity(admin=False)
        with session_scope() as db:
            kw["db"] = db
            logger.debug(f"Auth OK: user={claim.user_id} {request.method} {request.path}")
            return f(*a, **kw)

    return inner


def session_required(f):
    @wraps(f)
    def inner(*a, **kw):
        _require_identity(admin=False)
        return f(*a, **kw)

    return inner


def admin_required(f):
    @wraps(f)
    def inner(*a, **kw):
        _require_identity(admin=True)
        return f(*a, **kw)

    return inner


__all__ = [
    "admin_required",
    "auth_required",
    "current_claim",
    "session_cookie",
    "session_required",
    "verify_request_identity",
]
