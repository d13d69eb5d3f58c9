from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask

from nestfinder.application.use_cases.users.current_user import GetCurrentUserUseCase
from nestfinder.application.use_cases.users.login_user import LoginResult, LoginUserUseCase
from nestfinder.domain.users.entities import IdentityClaim, User
from nestfinder.domain.users.exceptions import InvalidCredentialsError
from nestfinder.infrastructure.auth.gate import AUTH_EXTENSION_KEY
from nestfinder.infrastructure.auth.session_cookie import COOKIE_NAME, SessionCookie
from nestfinder.interfaces.http.controllers import auth_controller
from nestfinder.interfaces.http.controllers.auth_controller import AuthController
from nestfinder.shared.middleware.error_handler import configure_error_handling

HENRY = User(
    id="u-henry",
    username="henry",
    password_hash="hash",
    display_name="Henry",
    is_admin=True,
    created_at=datetime.now(UTC),
    onboarding_complete=True,
)


class StubCodec:
    def issue(self, claim: IdentityClaim) -> str:
        return "token123"

    def verify(self, token: str) -> IdentityClaim | None:
        if token == "token123":
            return IdentityClaim(user_id=HENRY.id, username=HENRY.username, is_admin=True)
        return None


@pytest.fixture()
def audit_calls(monkeypatch: pytest.MonkeyPatch) -> list[tuple]:
    calls: list[tuple] = []
    monkeypatch.setattr(
        auth_controller, "audit_log", lambda action, **kwargs: calls.append((action, kwargs))
    )
    return calls


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    app.extensions[AUTH_EXTENSION_KEY] = (StubCodec(), SessionCookie(secure=False))
    return app


def _controller(**overrides) -> AuthController:
    deps = {
        "login_use_case": MagicMock(),
        "current_user_use_case": MagicMock(),
        "change_password_use_case": MagicMock(),
    }
    deps.update(overrides)
    return AuthController(**deps)


def test_login_endpoint_sets_cookie(flask_app: Flask, audit_calls: list[tuple]) -> None:
    login_called: dict[str, tuple[str, str]] = {}

    class StubLogin:
        def execute(self, username: str, password: str) -> LoginResult:
            login_called["args"] = (username, password)
            return LoginResult(user=HENRY, token="token123")

    flask_app.register_blueprint(
        _controller(login_use_case=cast(LoginUserUseCase, StubLogin())).as_blueprint()
    )

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"username": "Henry", "password": "pw"})

    assert response.status_code == 200
    assert login_called["args"] == ("Henry", "pw")
    assert response.headers["Set-Cookie"].startswith(f"{COOKIE_NAME}=token123")
    assert response.get_json() == {
        "user": {
            "id": "u-henry",
            "username": "henry",
            "displayName": "Henry",
            "isAdmin": True,
            "onboardingComplete": True,
        }
    }
    assert "passwordHash" not in response.get_data(as_text=True)
    assert audit_calls[0][0].value == "login_success"


def test_login_invalid_credentials_returns_401(
    flask_app: Flask, audit_calls: list[tuple]
) -> None:
    login = MagicMock()
    login.execute.side_effect = InvalidCredentialsError()
    flask_app.register_blueprint(_controller(login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"username": "henry", "password": "nope"})

    assert response.status_code == 401
    assert response.get_json()["error"] == "Invalid credentials"
    assert "Set-Cookie" not in response.headers
    assert audit_calls[0][1]["success"] is False


def test_login_missing_fields_returns_400(flask_app: Flask) -> None:
    login = MagicMock()
    flask_app.register_blueprint(_controller(login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"username": "henry"})

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["code"] == "validation_error"
    assert payload["error"] == "password is required"
    login.execute.assert_not_called()


def test_logout_clears_cookie(flask_app: Flask, audit_calls: list[tuple]) -> None:
    flask_app.register_blueprint(_controller().as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.get_json() == {"success": True}
    assert response.headers["Set-Cookie"].startswith(f"{COOKIE_NAME}=;")


def test_me_returns_live_user(flask_app: Flask) -> None:
    current = MagicMock(spec=GetCurrentUserUseCase)
    current.execute.return_value = HENRY
    flask_app.register_blueprint(_controller(current_user_use_case=current).as_blueprint())

    with flask_app.test_client() as client:
        client.set_cookie(COOKIE_NAME, "token123")
        response = client.get("/api/auth/me")

    assert response.get_json()["user"]["displayName"] == "Henry"
    current.execute.assert_called_once_with(
        IdentityClaim(user_id="u-henry", username="henry", is_admin=True)
    )


def test_me_without_session_returns_null(flask_app: Flask) -> None:
    current = MagicMock(spec=GetCurrentUserUseCase)
    current.execute.return_value = None
    flask_app.register_blueprint(_controller(current_user_use_case=current).as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/auth/me")

    assert response.status_code == 200
    assert response.get_json() == {"user": None}
    current.execute.assert_called_once_with(None)


def test_change_password_requires_session(flask_app: Flask) -> None:
    change = MagicMock()
    flask_app.register_blueprint(_controller(change_password_use_case=change).as_blueprint())

    with flask_app.test_client() as client:
        response = client.put(
            "/api/auth/password",
            json={"currentPassword": "old-password", "newPassword": "new-password"},
        )

    assert response.status_code == 401
    change.execute.assert_not_called()
