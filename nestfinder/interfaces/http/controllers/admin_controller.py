# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from nestfinder.application.use_cases.admin.create_user import CreateUserUseCase
from nestfinder.application.use_cases.admin.delete_user import DeleteUserUseCase
from nestfinder.application.use_cases.admin.list_users import ListUsersUseCase
from nestfinder.application.use_cases.admin.update_user import UpdateUserUseCase
from nestfinder.infrastructure.audit import AuditAction, audit_log
from nestfinder.infrastructure.auth import admin_required, current_claim
from nestfinder.infrastructure.metrics import render_metrics
from nestfinder.interfaces.http.dto.admin import CreateUserRequestDTO, UpdateUserRequestDTO
from nestfinder.interfaces.http.dto.auth import admin_user_payload
from nestfinder.interfaces.http.helpers import parse_body
from nestfinder.shared.logging import logger
from nestfinder.shared.middleware.rate_limit import client_ip


class AdminController:
    def __init__(
        self,
        *,
        list_users: ListUsersUseCase,
        create_user: CreateUserUseCase,
        update_user: UpdateUserUseCase,
        delete_user: DeleteUserUseCase,
    ) -> None:
        self._list_users = list_users
        self._create_user = create_user
        self._update_user = update_user
        self._delete_user = delete_user

    @admin_required
    def users(self) -> tuple[Response, int]:
        users = self._list_users.execute()
        logger.info(f"admin.users: n={len(users)}")
        return jsonify({"users": [admin_user_payload(u) for u in users]}), 200

    @admin_required
    def create(self) -> tuple[Response, int]:
        dto = parse_body(CreateUserRequestDTO)
        user = self._create_user.execute(
            dto.username,
            dto.password,
            display_name=dto.display_name,
            is_admin=dto.is_admin,
        )
        audit_log(
            AuditAction.USER_CREATED,
            user_id=current_claim().user_id,
            ip_address=client_ip(),
            details={"created_user_id": user.id, "username": user.username},
        )
        return jsonify({"user": admin_user_payload(user)}), 201

    @admin_required
    def update(self, user_id: str) -> tuple[Response, int]:
        dto = parse_body(UpdateUserRequestDTO)
        user = self._update_user.execute(
            user_id,
            display_name=dto.display_name,
            is_admin=dto.is_admin,
            password=dto.password,
        )
        audit_log(
            AuditAction.USER_UPDATED,
            user_id=current_claim().user_id,
            ip_address=client_ip(),
            details={"target_user_id": user_id, "fields": sorted(dto.model_fields_set)},
        )
        return jsonify({"user": admin_user_payload(user)}), 200

    @admin_required
    def delete(self, user_id: str) -> tuple[Response, int]:
        acting = current_claim().user_id
        self._delete_user.execute(user_id, acting_user_id=acting)
        audit_log(
            AuditAction.USER_DELETED,
            user_id=acting,
            ip_address=client_ip(),
            details={"target_user_id": user_id},
        )
        return jsonify({"success": True}), 200

    @admin_required
    def metrics(self) -> Response:
        payload, content_type = render_metrics()
        return Response(payload, content_type=content_type)

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("admin", __name__, url_prefix="/api/admin")
        bp.add_url_rule("/users", view_func=self.users, methods=["GET"])
        bp.add_url_rule("/users", view_func=self.create, methods=["POST"])
        bp.add_url_rule("/users/<user_id>", view_func=self.update, methods=["PUT"])
        bp.add_url_rule("/users/<user_id>", view_func=self.delete, methods=["DELETE"])
        bp.add_url_rule("/metrics", view_func=self.metrics, methods=["GET"])
        return bp
