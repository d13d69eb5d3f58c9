# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-user preferences, the shared budget, area notes and todos."""

from __future__ import annotations

from flask import Blueprint, jsonify
from sqlalchemy.orm import Session

from nestfinder.infrastructure.auth import auth_required, current_claim
from nestfinder.interfaces.http.dto.household import (
    AreaNoteDTO,
    BudgetUpdateDTO,
    DismissAreaDTO,
    PreferencesDTO,
    TodoCreateDTO,
    TodoUpdateDTO,
)
from nestfinder.interfaces.http.helpers import parse_body
from nestfinder.services import areas_service, preferences_service, todos_service


class HouseholdController:
    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("household", __name__, url_prefix="/api")
        bp.add_url_rule("/preferences", view_func=self.get_preferences, methods=["GET"])
        bp.add_url_rule("/preferences", view_func=self.save_preferences, methods=["PUT"])
        bp.add_url_rule("/budget", view_func=self.get_budget, methods=["GET"])
        bp.add_url_rule("/budget", view_func=self.set_salary, methods=["PUT"])
        bp.add_url_rule("/area-notes", view_func=self.list_area_notes, methods=["GET"])
        bp.add_url_rule("/area-notes", view_func=self.save_area_note, methods=["PUT"])
        bp.add_url_rule("/dismissed-areas", view_func=self.list_dismissed, methods=["GET"])
        bp.add_url_rule("/dismissed-areas", view_func=self.dismiss, methods=["POST"])
        bp.add_url_rule("/dismissed-areas", view_func=self.restore, methods=["DELETE"])
        bp.add_url_rule("/todos", view_func=self.list_todos, methods=["GET"])
        bp.add_url_rule("/todos", view_func=self.create_todo, methods=["POST"])
        bp.add_url_rule("/todos/<todo_id>", view_func=self.update_todo, methods=["PUT"])
        bp.add_url_rule("/todos/<todo_id>", view_func=self.delete_todo, methods=["DELETE"])
        return bp

    @auth_required
    def get_preferences(self, db: Session):
        prefs = preferences_service.get_preferences(db, current_claim().user_id)
        return jsonify({"preferences": prefs})

    @auth_required
    def save_preferences(self, db: Session):
        dto = parse_body(PreferencesDTO)
        prefs = preferences_service.save_preferences(
            db, current_claim().user_id, dto.model_dump()
        )
        return jsonify({"preferences": prefs})

    @auth_required
    def get_budget(self, db: Session):
        return jsonify(preferences_service.budget_overview(db))

    @auth_required
    def set_salary(self, db: Session):
        dto = parse_body(BudgetUpdateDTO)
        prefs = preferences_service.set_annual_salary(
            db, current_claim().user_id, dto.annual_salary
        )
        return jsonify({"preferences": prefs})

    @auth_required
    def list_area_notes(self, db: Session):
        return jsonify({"areaNotes": areas_service.list_area_notes(db)})

    @auth_required
    def save_area_note(self, db: Session):
        dto = parse_body(AreaNoteDTO)
        note = areas_service.save_area_note(
            db, current_claim().user_id, dto.area_name, dto.liked, dto.disliked
        )
        return jsonify({"areaNote": note})

    @auth_required
    def list_dismissed(self, db: Session):
        return jsonify({"dismissedAreas": areas_service.list_dismissed_areas(db)})

    @auth_required
    def dismiss(self, db: Session):
        dto = parse_body(DismissAreaDTO)
        row = areas_service.dismiss_area(db, current_claim().user_id, dto.area_name, dto.reason)
        return jsonify({"dismissedArea": row}), 201

    @auth_required
    def restore(self, db: Session):
        dto = parse_body(DismissAreaDTO)
        areas_service.restore_area(db, current_claim().user_id, dto.area_name)
        return jsonify({"success": True})

    @auth_required
    def list_todos(self, db: Session):
        return jsonify({"todos": todos_service.list_todos(db)})

    @auth_required
    def create_todo(self, db: Session):
        dto = parse_body(TodoCreateDTO)
        todo = todos_service.create_todo(db, current_claim().user_id, dto.model_dump())
        return jsonify({"todo": todo}), 201

    @auth_required
    def update_todo(self, todo_id: str, db: Session):
        dto = parse_body(TodoUpdateDTO)
        return jsonify({"todo": todos_service.update_todo(db, todo_id, dto.changes())})

    @auth_required
    def delete_todo(self, todo_id: str, db: Session):
        todos_service.delete_todo(db, todo_id)
        return jsonify({"success": True})
