# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, jsonify
from sqlalchemy.orm import Session

from nestfinder.infrastructure.auth import auth_required, current_claim
from nestfinder.infrastructure.storage import ObjectStorage
from nestfinder.interfaces.http.dto.viewings import (
    NoteCreateDTO,
    NoteUpdateDTO,
    ViewingCreateDTO,
    ViewingUpdateDTO,
)
from nestfinder.interfaces.http.helpers import parse_body, photo_uploads
from nestfinder.services import viewings_service


class ViewingsController:
    def __init__(self, *, storage: ObjectStorage) -> None:
        self._storage = storage

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("viewings", __name__, url_prefix="/api/viewings")
        bp.add_url_rule("", view_func=self.list_viewings, methods=["GET"])
        bp.add_url_rule("", view_func=self.create, methods=["POST"])
        bp.add_url_rule("/<viewing_id>", view_func=self.update, methods=["PUT"])
        bp.add_url_rule("/<viewing_id>", view_func=self.delete, methods=["DELETE"])
        bp.add_url_rule("/<viewing_id>/notes", view_func=self.list_notes, methods=["GET"])
        bp.add_url_rule("/<viewing_id>/notes", view_func=self.create_note, methods=["POST"])
        bp.add_url_rule(
            "/<viewing_id>/notes/<note_id>", view_func=self.update_note, methods=["PUT"]
        )
        bp.add_url_rule(
            "/<viewing_id>/notes/<note_id>", view_func=self.delete_note, methods=["DELETE"]
        )
        bp.add_url_rule(
            "/<viewing_id>/notes/<note_id>/photos",
            view_func=self.upload_note_photos,
            methods=["POST"],
        )
        return bp

    @auth_required
    def list_viewings(self, db: Session):
        return jsonify({"viewings": viewings_service.list_viewings(db)})

    @auth_required
    def create(self, db: Session):
        dto = parse_body(ViewingCreateDTO)
        viewing = viewings_service.create_viewing(db, current_claim().user_id, dto.changes())
        return jsonify({"viewing": viewing}), 201

    @auth_required
    def update(self, viewing_id: str, db: Session):
        dto = parse_body(ViewingUpdateDTO)
        return jsonify({"viewing": viewings_service.update_viewing(db, viewing_id, dto.changes())})

    @auth_required
    def delete(self, viewing_id: str, db: Session):
        viewings_service.delete_viewing(db, viewing_id)
        return jsonify({"success": True})

    @auth_required
    def list_notes(self, viewing_id: str, db: Session):
        return jsonify({"notes": viewings_service.list_notes(db, viewing_id)})

    @auth_required
    def create_note(self, viewing_id: str, db: Session):
        dto = parse_body(NoteCreateDTO)
        note = viewings_service.create_note(db, viewing_id, dto.changes())
        return jsonify({"note": note}), 201

    @auth_required
    def update_note(self, viewing_id: str, note_id: str, db: Session):
        dto = parse_body(NoteUpdateDTO)
        note = viewings_service.update_note(db, viewing_id, note_id, dto.changes())
        return jsonify({"note": note})

    @auth_required
    def delete_note(self, viewing_id: str, note_id: str, db: Session):
        viewings_service.delete_note(db, viewing_id, note_id)
        return jsonify({"success": True})

    @auth_required
    def upload_note_photos(self, viewing_id: str, note_id: str, db: Session):
        photos = viewings_service.add_note_photos(
            db, viewing_id, note_id, photo_uploads(), self._storage
        )
        return jsonify({"photos": photos})
