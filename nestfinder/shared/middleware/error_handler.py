# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask, jsonify
from werkzeug.exceptions import RequestEntityTooLarge

from nestfinder.shared.errors import register_error_handler
from nestfinder.shared.logging import logger


def configure_error_handling(app: Flask) -> None:
    register_error_handler(app)

    @app.errorhandler(RequestEntityTooLarge)
    def _request_too_large(exc: RequestEntityTooLarge):
        limit_mb = (app.config.get("MAX_CONTENT_LENGTH") or 0) // (1024 * 1024)
        logger.warning(f"upload: request body over {limit_mb}MB rejected")
        body = {"error": f"Request too large (max {limit_mb}MB)", "code": "payload_too_large"}
        return jsonify(body), 413
