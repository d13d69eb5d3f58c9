# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Request, Response

from nestfinder.shared.config.settings import SESSION_LIFETIME_SECONDS

COOKIE_NAME = "housing_session"


class SessionCookie:
    """Carries the session token between browser and server."""

    def __init__(
        self,
        *,
        secure: bool,
        name: str = COOKIE_NAME,
        max_age: int = SESSION_LIFETIME_SECONDS,
    ) -> None:
        self.name = name
        self.secure = secure
        self.max_age = max_age

    def attach(self, response: Response, token: str) -> Response:
        response.set_cookie(
            self.name,
            token,
            max_age=self.max_age,
            path="/",
            httponly=True,
            samesite="Lax",
            secure=self.secure,
        )
        return response

    def read(self, request: Request) -> str | None:
        return request.cookies.get(self.name) or None

    def clear(self, response: Response) -> Response:
        response.delete_cookie(
            self.name,
            path="/",
            httponly=True,
            samesite="Lax",
            secure=self.secure,
        )
        return response


__all__ = ["COOKIE_NAME", "SessionCookie"]
