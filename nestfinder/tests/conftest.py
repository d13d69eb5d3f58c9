from __future__ import annotations

import os
import tempfile
import uuid
from datetime import UTC, datetime
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="nestfinder-tests-"))

# Configuration is read once per process, so it must be in place before
# anything under nestfinder is imported.
os.environ.update(
    {
        "APP_ENV": "test",
        "JWT_SECRET": "test-signing-secret-with-enough-entropy-0123456789",
        "DATABASE_URL": f"sqlite:///{_TMP / 'nestfinder-test.db'}",
        "STORAGE_DIR": str(_TMP / "uploads"),
        "LOG_FILE": "",
        "ENABLE_RATE_LIMIT": "0",
        "GEOCODER_ENABLED": "0",
        "SCRAPER_ENABLED": "0",
        "RESILIENCE_BACKOFF_BASE": "0",
        "ADMIN_USERNAME": "Henry",
        "ADMIN_PASSWORD": "correct horse battery",
        "ADMIN_DISPLAY_NAME": "Henry",
    }
)

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from nestfinder.app import create_app  # noqa: E402
from nestfinder.domain.users.entities import User  # noqa: E402
from nestfinder.infrastructure.auth.session_cookie import COOKIE_NAME  # noqa: E402
from nestfinder.infrastructure.container import container  # noqa: E402
from nestfinder.tests.support import session_token_for  # noqa: E402

MEMBER_PASSWORD = "zoey-password-2026"


@pytest.fixture(scope="session")
def app() -> Flask:
    flask_app = create_app()
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture(scope="session")
def admin_user(app: Flask) -> User:
    user = container.user_repository.find_by_username("henry")
    assert user is not None
    return user


@pytest.fixture(scope="session")
def member_user(app: Flask) -> User:
    return container.user_repository.add(
        User(
            id=str(uuid.uuid4()),
            username="zoey",
            password_hash=container.password_hasher.hash(MEMBER_PASSWORD),
            display_name="Zoey",
            is_admin=False,
            created_at=datetime.now(UTC),
        )
    )


@pytest.fixture()
def admin_client(app: Flask, admin_user: User) -> FlaskClient:
    client = app.test_client()
    client.set_cookie(COOKIE_NAME, session_token_for(admin_user))
    return client


@pytest.fixture()
def member_client(app: Flask, member_user: User) -> FlaskClient:
    client = app.test_client()
    client.set_cookie(COOKIE_NAME, session_token_for(member_user))
    return client


@pytest.fixture(scope="session")
def storage_root() -> Path:
    return _TMP / "uploads"
