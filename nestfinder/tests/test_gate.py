from __future__ import annotations

import pytest
from flask import Flask, g, jsonify

from nestfinder.domain.users.entities import IdentityClaim
from nestfinder.infrastructure.auth.gate import (
    GateVerdict,
    RequestGate,
    configure_request_gate,
    is_public_path,
    is_static_path,
)
from nestfinder.infrastructure.auth.session_cookie import COOKIE_NAME, SessionCookie

CLAIM = IdentityClaim(user_id="u-1", username="henry", is_admin=False)


class StubCodec:
    """Accepts exactly one token."""

    def issue(self, claim: IdentityClaim) -> str:
        return "good-token"

    def verify(self, token: str) -> IdentityClaim | None:
        return CLAIM if token == "good-token" else None


@pytest.fixture()
def gate() -> RequestGate:
    return RequestGate(StubCodec())


@pytest.mark.parametrize(
    "path",
    ["/login", "/api/auth/login", "/api/auth/logout", "/login/", "/api/auth/login/extra"],
)
def test_public_paths(path: str) -> None:
    assert is_public_path(path)


@pytest.mark.parametrize("path", ["/loginx", "/api/auth/me", "/api/auth/loginfoo", "/"])
def test_non_public_paths(path: str) -> None:
    assert not is_public_path(path)


@pytest.mark.parametrize(
    "path", ["/static/app.js", "/uploads/listing-photos/a/b.jpg", "/favicon.ico", "/robots.txt"]
)
def test_static_paths(path: str) -> None:
    assert is_static_path(path)


@pytest.mark.parametrize("path", ["/", "/dashboard", "/api/listings", "/api/export.csv"])
def test_non_static_paths(path: str) -> None:
    assert not is_static_path(path)


def test_public_path_needs_no_token(gate: RequestGate) -> None:
    assert gate.decide("/login", None).verdict is GateVerdict.ALLOW_PUBLIC


def test_static_path_needs_no_token(gate: RequestGate) -> None:
    assert gate.decide("/static/app.css", None).verdict is GateVerdict.ALLOW_STATIC


def test_missing_token_is_denied(gate: RequestGate) -> None:
    decision = gate.decide("/api/listings", None)

    assert decision.verdict is GateVerdict.DENY
    assert not decision.allowed
    assert decision.claim is None


def test_invalid_token_is_denied(gate: RequestGate) -> None:
    assert gate.decide("/", "forged").verdict is GateVerdict.DENY


def test_valid_token_carries_claim(gate: RequestGate) -> None:
    decision = gate.decide("/api/listings", "good-token")

    assert decision.verdict is GateVerdict.ALLOW
    assert decision.claim == CLAIM


@pytest.fixture()
def gated_app() -> Flask:
    app = Flask(__name__)
    configure_request_gate(app, StubCodec(), SessionCookie(secure=False))

    @app.get("/api/whoami")
    def whoami():
        return jsonify({"userId": g.user_id, "username": g.username, "isAdmin": g.is_admin})

    @app.get("/dashboard")
    def dashboard():
        return "ok"

    @app.get("/login")
    def login():
        return "login page"

    return app


def test_denied_api_request_gets_401(gated_app: Flask) -> None:
    response = gated_app.test_client().get("/api/whoami")

    assert response.status_code == 401
    assert response.get_json() == {"error": "Unauthorized", "code": "unauthorized"}


def test_denied_page_request_redirects_to_login(gated_app: Flask) -> None:
    response = gated_app.test_client().get("/dashboard")

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/login")


def test_public_page_is_served_without_cookie(gated_app: Flask) -> None:
    assert gated_app.test_client().get("/login").status_code == 200


def test_allowed_request_carries_identity(gated_app: Flask) -> None:
    client = gated_app.test_client()
    client.set_cookie(COOKIE_NAME, "good-token")

    response = client.get("/api/whoami")

    assert response.status_code == 200
    assert response.get_json() == {"userId": "u-1", "username": "henry", "isAdmin": False}


def test_preflight_is_not_gated(gated_app: Flask) -> None:
    assert gated_app.test_client().options("/api/whoami").status_code != 401
