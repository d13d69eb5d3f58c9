# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-request authorization gate.

Every inbound request is classified by path. Public and static paths pass
untouched; everything else needs a session cookie whose token verifies.
Denied API calls get a 401 JSON body, denied page loads are redirected to
the login page.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from flask import Flask, g, jsonify, redirect, request

from nestfinder.domain.users.entities import IdentityClaim
from nestfinder.domain.users.repositories import SessionTokenCodec
from nestfinder.infrastructure.auth.session_cookie import SessionCookie
from nestfinder.shared.logging import logger

LOGIN_PAGE = "/login"
PUBLIC_PATHS: tuple[str, ...] = ("/login", "/api/auth/login", "/api/auth/logout")
STATIC_PREFIXES: tuple[str, ...] = ("/static/", "/uploads/", "/favicon")
AUTH_EXTENSION_KEY = "nestfinder.auth"


class GateVerdict(str, Enum):
    ALLOW_PUBLIC = "allow_public"
    ALLOW_STATIC = "allow_static"
    ALLOW = "allow"
    DENY = "deny"


@dataclass(slots=True, frozen=True)
class GateDecision:
    verdict: GateVerdict
    claim: IdentityClaim | None = None

    @property
    def allowed(self) -> bool:
        return self.verdict is not GateVerdict.DENY


def is_public_path(path: str) -> bool:
    return any(path == public or path.startswith(public + "/") for public in PUBLIC_PATHS)


def is_api_path(path: str) -> bool:
    return path == "/api" or path.startswith("/api/")


def is_static_path(path: str) -> bool:
    if path.startswith(STATIC_PREFIXES):
        return True
    if is_api_path(path):
        return False
    last_segment = path.rsplit("/", 1)[-1]
    return "." in last_segment.strip(".")


class RequestGate:
    def __init__(self, codec: SessionTokenCodec) -> None:
        self._codec = codec

    def decide(self, path: str, token: str | None) -> GateDecision:
        if is_public_path(path):
            return GateDecision(GateVerdict.ALLOW_PUBLIC)
        if is_static_path(path):
            return GateDecision(GateVerdict.ALLOW_STATIC)
        if not token:
            return GateDecision(GateVerdict.DENY)
        claim = self._codec.verify(token)
        if claim is None:
            return GateDecision(GateVerdict.DENY)
        return GateDecision(GateVerdict.ALLOW, claim)


def bind_identity(claim: IdentityClaim) -> None:
    g.user_id = claim.user_id
    g.username = claim.username
    g.is_admin = claim.is_admin


def configure_request_gate(app: Flask, codec: SessionTokenCodec, cookie: SessionCookie) -> RequestGate:
    gate = RequestGate(codec)
    app.extensions[AUTH_EXTENSION_KEY] = (codec, cookie)

    @app.before_request
    def _gate_request():
        if request.method == "OPTIONS":
            return None
        decision = gate.decide(request.path, cookie.read(request))
        if decision.claim is not None:
            bind_identity(decision.claim)
            return None
        if decision.allowed:
            return None

        logger.info(f"gate: denied {request.method} {request.path}")
        if is_api_path(request.path):
            return jsonify({"error": "Unauthorized", "code": "unauthorized"}), 401
        return redirect(LOGIN_PAGE)

    return gate


__all__ = [
    "AUTH_EXTENSION_KEY",
    "GateDecision",
    "GateVerdict",
    "PUBLIC_PATHS",
    "RequestGate",
    "bind_identity",
    "configure_request_gate",
    "is_api_path",
    "is_public_path",
    "is_static_path",
]
