# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from nestfinder.infrastructure.admin_setup import setup_admin_user
from nestfinder.infrastructure.auth.gate import configure_request_gate
from nestfinder.infrastructure.container import Container, container
from nestfinder.infrastructure.db import init_db
from nestfinder.shared.logging import logger, setup_logging
from nestfinder.shared.middleware.error_handler import configure_error_handling
from nestfinder.shared.middleware.request_logger import configure_request_logging

# Multipart bodies may carry several photos; each one is checked individually.
MAX_REQUEST_BYTES = 100 * 1024 * 1024


def create_app(services: Container | None = None) -> Flask:
    services = services or container
    config = services.config

    setup_logging(debug_mode=config.debug_logging)
    init_db()

    if config.uses_default_secret:
        logger.warning(
            "JWT_SECRET is not set; signing sessions with the built-in development secret"
        )

    setup_admin_user(config.admin, services.user_repository, services.password_hasher)

    app = Flask(__name__)
    app.config.update(MAX_CONTENT_LENGTH=MAX_REQUEST_BYTES)
    if config.security.trusted_proxies:
        hops = config.security.trusted_proxies
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops)  # type: ignore[method-assign]

    configure_error_handling(app)
    configure_request_logging(app)
    configure_request_gate(app, services.token_codec, services.session_cookie)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    app.register_blueprint(services.misc_controller.as_blueprint())
    app.register_blueprint(services.auth_controller.as_blueprint())
    app.register_blueprint(services.admin_controller.as_blueprint())
    app.register_blueprint(services.listings_controller.as_blueprint())
    app.register_blueprint(services.viewings_controller.as_blueprint())
    app.register_blueprint(services.household_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "same-origin")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
        resp.headers.setdefault(
            "Permissions-Policy",
            "microphone=(), camera=(), payment=(), usb=()",
        )
        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )
        return resp

    logger.info("Flask app initialized")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
