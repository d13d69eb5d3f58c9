# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
import time

from flask import Flask, Response, g, request

from nestfinder.infrastructure.metrics import observe_request
from nestfinder.shared.config import load_config
from nestfinder.shared.logging import clear_request_id, get_request_id, logger, set_request_id
from nestfinder.shared.middleware.rate_limit import client_ip

# Served files are logged at DEBUG so photo-heavy pages don't flood the log.
_QUIET_PREFIXES = ("/static/", "/uploads/", "/favicon")
_HIDDEN_HEADERS = frozenset({"cookie", "set-cookie", "authorization"})


def _who() -> str:
    return getattr(g, "username", None) or "anonymous"


def _visible_headers() -> dict[str, str]:
    return {
        key: "<hidden>" if key.lower() in _HIDDEN_HEADERS else value
        for key, value in request.headers.items()
    }


def _upload_summary() -> str:
    if not request.files:
        return ""
    names = [f.filename or "?" for f in request.files.getlist("photos")]
    return f" files={names}"


def configure_request_logging(app: Flask) -> None:
    config = load_config()
    verbose = config.debug_logging
    metrics_enabled = config.observability.metrics_enabled

    @app.before_request
    def _start_request() -> None:
        set_request_id(request.headers.get("X-Request-ID") or secrets.token_hex(4))
        g.request_started = time.perf_counter()
        if request.path.startswith(_QUIET_PREFIXES):
            return
        if verbose:
            logger.debug(
                f"-> {request.method} {request.full_path.rstrip('?')} from {client_ip()} "
                f"size={request.content_length or 0} headers={_visible_headers()}"
            )
        else:
            logger.info(f"-> {request.method} {request.path} from {client_ip()}")

    @app.after_request
    def _finish_request(response: Response) -> Response:
        elapsed_ms = (time.perf_counter() - g.get("request_started", time.perf_counter())) * 1000
        if metrics_enabled:
            observe_request(request.method, request.endpoint, response.status_code, elapsed_ms / 1000)
        response.headers.setdefault("X-Request-ID", get_request_id())
        message = (
            f"<- {request.method} {request.path} {response.status_code} "
            f"{elapsed_ms:.0f}ms user={_who()}"
        )
        if request.path.startswith(_QUIET_PREFIXES):
            logger.debug(message)
        elif response.status_code >= 500:
            logger.error(message)
        else:
            logger.info(message + (_upload_summary() if request.method == "POST" else ""))
        return response

    @app.teardown_request
    def _end_request(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"request failed: {type(exc).__name__} on {request.method} {request.path}")
        clear_request_id()


__all__ = ["configure_request_logging"]
