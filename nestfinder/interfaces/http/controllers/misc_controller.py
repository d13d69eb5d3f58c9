# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pathlib import Path

from flask import Blueprint, jsonify, redirect, render_template, send_from_directory
from sqlalchemy.exc import SQLAlchemyError

from nestfinder.infrastructure.auth import verify_request_identity
from nestfinder.infrastructure.auth.gate import LOGIN_PAGE
from nestfinder.infrastructure.health import database_latency_ms
from nestfinder.shared.logging import logger


class MiscController:
    """Pages, uploaded files and the health probe."""

    def __init__(self, *, uploads_dir: Path) -> None:
        self._uploads_dir = uploads_dir

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        bp.add_url_rule("/login", view_func=self.login_page, methods=["GET"])
        bp.add_url_rule("/", view_func=self.index, methods=["GET"])
        bp.add_url_rule("/uploads/<path:filename>", view_func=self.uploads, methods=["GET"])
        return bp

    def health(self):
        try:
            latency = database_latency_ms()
        except SQLAlchemyError as exc:
            logger.error(f"health: database check failed ({type(exc).__name__})")
            return jsonify({"ok": False, "database": "error"}), 503
        return jsonify({"ok": True, "database": "ok", "latencyMs": latency}), 200

    def login_page(self):
        return render_template("login.html")

    def index(self):
        claim = verify_request_identity()
        if claim is None:
            return redirect(LOGIN_PAGE)
        return render_template("index.html", username=claim.username)

    def uploads(self, filename: str):
        return send_from_directory(self._uploads_dir, filename)
