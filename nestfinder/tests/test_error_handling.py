# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import pytest
from flask import Flask, request
from flask.testing import FlaskClient

from nestfinder.domain.exceptions import InvariantViolationError
from nestfinder.shared.errors import ConflictError
from nestfinder.shared.middleware.error_handler import configure_error_handling


@pytest.fixture()
def client() -> FlaskClient:
    app = Flask(__name__)
    app.config.update(MAX_CONTENT_LENGTH=1024 * 1024)
    configure_error_handling(app)

    @app.post("/api/upload")
    def upload():
        return {"size": len(request.get_data())}

    @app.get("/api/conflict")
    def conflict():
        raise ConflictError("Username already exists")

    @app.get("/api/invariant")
    def invariant():
        raise InvariantViolationError("must be between 0 and 10", field="manualScore")

    @app.get("/api/boom")
    def boom():
        raise RuntimeError("kaboom")

    return app.test_client()


def test_app_error_renders_code(client: FlaskClient) -> None:
    response = client.get("/api/conflict")

    assert response.status_code == 409
    assert response.get_json() == {"error": "Username already exists", "code": "conflict"}


def test_invariant_violation_is_bad_request(client: FlaskClient) -> None:
    response = client.get("/api/invariant")

    assert response.status_code == 400
    body = response.get_json()
    assert body["code"] == "validation_error"
    assert body["context"] == {"fields": ["manualScore"]}


def test_unexpected_error_hides_details(client: FlaskClient) -> None:
    response = client.get("/api/boom")

    assert response.status_code == 500
    assert "kaboom" not in response.get_data(as_text=True)
    assert response.get_json()["code"] == "internal_error"


def test_oversized_body_is_json_413(client: FlaskClient) -> None:
    response = client.post("/api/upload", data=b"0" * (2 * 1024 * 1024))

    assert response.status_code == 413
    assert response.get_json() == {"error": "Request too large (max 1MB)", "code": "payload_too_large"}


def test_small_body_passes(client: FlaskClient) -> None:
    response = client.post("/api/upload", data=b"0" * 10)

    assert response.status_code == 200
    assert response.get_json() == {"size": 10}
