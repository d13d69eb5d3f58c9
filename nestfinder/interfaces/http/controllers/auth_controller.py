# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from nestfinder.application.use_cases.users.change_password import ChangePasswordUseCase
from nestfinder.application.use_cases.users.current_user import GetCurrentUserUseCase
from nestfinder.application.use_cases.users.login_user import LoginUserUseCase
from nestfinder.domain.users.exceptions import InvalidCredentialsError
from nestfinder.infrastructure.audit import AuditAction, audit_log
from nestfinder.infrastructure.auth import (
    current_claim,
    session_cookie,
    session_required,
    verify_request_identity,
)
from nestfinder.interfaces.http.dto.auth import (
    ChangePasswordRequestDTO,
    LoginRequestDTO,
    session_user_payload,
)
from nestfinder.interfaces.http.helpers import parse_body
from nestfinder.shared.logging import logger
from nestfinder.shared.middleware.rate_limit import client_ip, rate_limit


class AuthController:
    def __init__(
        self,
        *,
        login_use_case: LoginUserUseCase,
        current_user_use_case: GetCurrentUserUseCase,
        change_password_use_case: ChangePasswordUseCase,
    ) -> None:
        self._login_use_case = login_use_case
        self._current_user_use_case = current_user_use_case
        self._change_password_use_case = change_password_use_case

    @rate_limit()
    def login(self) -> tuple[Response, int]:
        dto = parse_body(LoginRequestDTO)
        ip_address = client_ip()

        try:
            result = self._login_use_case.execute(dto.username, dto.password)
        except InvalidCredentialsError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"username": dto.username.lower()},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=result.user.id,
            ip_address=ip_address,
            details={"username": result.user.username},
        )
        response = jsonify({"user": session_user_payload(result.user)})
        session_cookie().attach(response, result.token)
        logger.info(f"auth.login: ok user_id={result.user.id}")
        return response, 200

    def logout(self) -> tuple[Response, int]:
        claim = verify_request_identity()
        response = jsonify({"success": True})
        session_cookie().clear(response)
        audit_log(
            AuditAction.LOGOUT,
            user_id=claim.user_id if claim else None,
            ip_address=client_ip(),
        )
        logger.info("auth.logout: ok")
        return response, 200

    def me(self) -> tuple[Response, int]:
        user = self._current_user_use_case.execute(verify_request_identity())
        return jsonify({"user": session_user_payload(user) if user else None}), 200

    @session_required
    def change_password(self) -> tuple[Response, int]:
        dto = parse_body(ChangePasswordRequestDTO)
        claim = current_claim()
        self._change_password_use_case.execute(
            claim.user_id, dto.current_password, dto.new_password
        )
        audit_log(AuditAction.PASSWORD_CHANGED, user_id=claim.user_id, ip_address=client_ip())
        return jsonify({"success": True}), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/me", view_func=self.me, methods=["GET"])
        bp.add_url_rule("/password", view_func=self.change_password, methods=["PUT"])
        return bp
