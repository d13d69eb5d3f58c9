# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from nestfinder.domain.exceptions import InvariantViolationError
from nestfinder.shared.config import load_config
from nestfinder.shared.logging import logger
from nestfinder.shared.middleware.rate_limit import client_ip

from .base import AppError, ValidationError


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    response = jsonify(error.to_dict())
    return response, error.status


def register_error_handler(
    app: Flask, *, default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
) -> None:
    config = load_config()
    debug_mode = config.debug_logging

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error(f"Handled error {exc.code} on {request.method} {request.path}")
        else:
            logger.info(
                f"Handled error {exc.code} ({int(exc.status)}) on {request.method} {request.path}"
            )
        return handle_app_error(exc)

    @app.errorhandler(InvariantViolationError)
    def _handle_invariant(exc: InvariantViolationError):
        context = {"fields": [exc.field]} if exc.field else None
        return _handle_app_error(ValidationError(str(exc), context=context))

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        if request.path.startswith("/api/"):
            response = jsonify({"error": exc.description or exc.name, "code": exc.name.lower().replace(" ", "_")})
            return response, exc.code or default_status
        return exc

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        ip_address = client_ip()
        user_id = getattr(g, "user_id", None)

        if debug_mode:
            logger.exception(
                f"Unhandled exception: {request.method} {request.path} "
                f"from {ip_address}, user={user_id}, "
                f"query={dict(request.args)}, body_size={request.content_length or 0}"
            )
        else:
            logger.opt(exception=exc).error(
                f"Error: {type(exc).__name__} on {request.method} {request.path}"
            )

        response = jsonify({"error": "Internal server error", "code": "internal_error"})
        return response, default_status
