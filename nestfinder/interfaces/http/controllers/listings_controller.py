# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from time import perf_counter

from flask import Blueprint, jsonify, request
from sqlalchemy.orm import Session

from nestfinder.domain.listings import ListingStatus
from nestfinder.infrastructure.auth import auth_required, current_claim
from nestfinder.infrastructure.geocoding import GeocoderPort
from nestfinder.infrastructure.scraper import ScraperPort
from nestfinder.infrastructure.storage import ObjectStorage
from nestfinder.interfaces.http.dto.listings import (
    ListingCreateDTO,
    ListingUpdateDTO,
    ScoreOverrideDTO,
    ScoreUpsertDTO,
)
from nestfinder.interfaces.http.helpers import parse_body, photo_uploads
from nestfinder.services import listings_service
from nestfinder.shared.errors import ValidationError
from nestfinder.shared.logging import logger


class ListingsController:
    def __init__(
        self, *, geocoder: GeocoderPort, scraper: ScraperPort, storage: ObjectStorage
    ) -> None:
        self._geocoder = geocoder
        self._scraper = scraper
        self._storage = storage

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("listings", __name__, url_prefix="/api/listings")
        bp.add_url_rule("", view_func=self.list_listings, methods=["GET"])
        bp.add_url_rule("", view_func=self.create, methods=["POST"])
        bp.add_url_rule("/reset-search", view_func=self.reset_search, methods=["POST"])
        bp.add_url_rule("/<listing_id>", view_func=self.get, methods=["GET"])
        bp.add_url_rule("/<listing_id>", view_func=self.update, methods=["PUT"])
        bp.add_url_rule("/<listing_id>", view_func=self.delete, methods=["DELETE"])
        bp.add_url_rule("/<listing_id>/select", view_func=self.select, methods=["POST"])
        bp.add_url_rule("/<listing_id>/photos", view_func=self.upload_photos, methods=["POST"])
        bp.add_url_rule("/<listing_id>/scores", view_func=self.upsert_score, methods=["POST"])
        bp.add_url_rule(
            "/<listing_id>/scores/<score_id>", view_func=self.override_score, methods=["PUT"]
        )
        return bp

    @auth_required
    def list_listings(self, db: Session):
        raw_status = request.args.get("status")
        status = None
        if raw_status:
            try:
                status = ListingStatus(raw_status.upper())
            except ValueError as exc:
                raise ValidationError(f"Unknown status: {raw_status}") from exc
        t0 = perf_counter()
        items = listings_service.list_listings(db, status)
        dt = (perf_counter() - t0) * 1000
        logger.info(f"listings.list: ok (n={len(items)}, dt_ms={dt:.0f})")
        return jsonify({"listings": items})

    @auth_required
    def create(self, db: Session):
        dto = parse_body(ListingCreateDTO)
        listing = listings_service.create_listing(
            db,
            current_claim().user_id,
            dto.changes(),
            geocoder=self._geocoder,
            scraper=self._scraper,
        )
        return jsonify({"listing": listing}), 201

    @auth_required
    def get(self, listing_id: str, db: Session):
        return jsonify({"listing": listings_service.get_listing(db, listing_id)})

    @auth_required
    def update(self, listing_id: str, db: Session):
        dto = parse_body(ListingUpdateDTO)
        listing = listings_service.update_listing(db, listing_id, dto.changes())
        return jsonify({"listing": listing})

    @auth_required
    def delete(self, listing_id: str, db: Session):
        listings_service.delete_listing(db, listing_id)
        logger.info(f"listings.delete: id={listing_id} by={current_claim().user_id}")
        return jsonify({"success": True})

    @auth_required
    def select(self, listing_id: str, db: Session):
        listings_service.select_listing(db, listing_id)
        return jsonify({"success": True})

    @auth_required
    def reset_search(self, db: Session):
        listings_service.reset_search(db)
        return jsonify({"success": True})

    @auth_required
    def upload_photos(self, listing_id: str, db: Session):
        photos = listings_service.add_listing_photos(
            db, listing_id, photo_uploads(), self._storage
        )
        return jsonify({"photos": photos})

    @auth_required
    def upsert_score(self, listing_id: str, db: Session):
        dto = parse_body(ScoreUpsertDTO)
        score = listings_service.upsert_score(
            db, listing_id, current_claim().user_id, dto.changes()
        )
        return jsonify({"score": score})

    @auth_required
    def override_score(self, listing_id: str, score_id: str, db: Session):
        dto = parse_body(ScoreOverrideDTO)
        score = listings_service.set_score_override(
            db, listing_id, score_id, dto.manual_override_score
        )
        return jsonify({"score": score})
