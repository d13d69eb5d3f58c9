# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session, selectinload

from nestfinder.domain.listings import (
    ACTIVE_STATUSES,
    ListingStatus,
    effective_area,
    effective_score,
    validate_score,
)
from nestfinder.infrastructure.db.models import Listing, ListingScore, Todo
from nestfinder.infrastructure.geocoding import GeocoderPort
from nestfinder.infrastructure.scraper import ScraperPort
from nestfinder.infrastructure.storage import ObjectStorage
from nestfinder.services.photos_service import PhotoUpload, discard_on_rollback, store_photos
from nestfinder.services.serializers import iso, user_brief
from nestfinder.shared.errors.base import ListingNotFoundError, ScoreNotFoundError
from nestfinder.shared.logging import logger

CALL_TODO_DELAY = timedelta(hours=24)
CALL_TODO_DURATION_MIN = 15

_LISTING_COLUMNS = {
    "title": "title",
    "description": "description",
    "url": "url",
    "address": "address",
    "latitude": "latitude",
    "longitude": "longitude",
    "price": "price",
    "bedrooms": "bedrooms",
    "bathrooms": "bathrooms",
    "pet_friendly": "petFriendly",
    "square_feet": "squareFeet",
    "contact_phone": "contactPhone",
    "parking": "parking",
    "laundry": "laundry",
    "year_built": "yearBuilt",
    "available_date": "availableDate",
    "neighbourhood": "neighbourhood",
    "photos": "photos",
    "scraped_content": "scrapedContent",
    "notes": "notes",
    "status": "status",
}


def score_to_dict(score: ListingScore) -> dict:
    return {
        "id": score.id,
        "listingId": score.listing_id,
        "userId": score.user_id,
        "user": user_brief(score.user),
        "aiOverallScore": score.ai_overall_score,
        "aiBreakdown": score.ai_breakdown,
        "aiSummary": score.ai_summary,
        "manualOverrideScore": score.manual_override_score,
        "effectiveScore": effective_score(score.manual_override_score, score.ai_overall_score),
        "evaluatedAt": iso(score.evaluated_at),
    }


def listing_to_dict(listing: Listing, *, with_scores: bool = True) -> dict:
    data: dict[str, Any] = {"id": listing.id, "addedBy": listing.added_by}
    for attr, key in _LISTING_COLUMNS.items():
        data[key] = getattr(listing, attr)
    data["photos"] = list(listing.photos or [])
    data["area"] = effective_area(listing.neighbourhood, listing.address)
    data["createdAt"] = iso(listing.created_at)
    data["updatedAt"] = iso(listing.updated_at)
    data["addedByUser"] = user_brief(listing.added_by_user)
    if with_scores:
        data["scores"] = [score_to_dict(s) for s in listing.scores]
    return data


def _load_listing(db: Session, listing_id: str) -> Listing:
    listing = db.scalars(
        select(Listing)
        .options(
            selectinload(Listing.added_by_user),
            selectinload(Listing.scores).selectinload(ListingScore.user),
        )
        .where(Listing.id == listing_id)
    ).first()
    if listing is None:
        raise ListingNotFoundError(listing_id)
    return listing


def list_listings(db: Session, status: ListingStatus | None = None) -> list[dict]:
    stmt = (
        select(Listing)
        .options(
            selectinload(Listing.added_by_user),
            selectinload(Listing.scores).selectinload(ListingScore.user),
        )
        .order_by(Listing.created_at.desc())
    )
    if status is not None:
        stmt = stmt.where(Listing.status == status.value)
    return [listing_to_dict(row) for row in db.scalars(stmt).all()]


def get_listing(db: Session, listing_id: str) -> dict:
    return listing_to_dict(_load_listing(db, listing_id))


def create_listing(
    db: Session,
    user_id: str,
    fields: dict[str, Any],
    *,
    geocoder: GeocoderPort,
    scraper: ScraperPort,
) -> dict:
    values = {key: value for key, value in fields.items() if key in _LISTING_COLUMNS}
    values.setdefault("description", "")
    values.setdefault("url", "")
    values.setdefault("address", "")
    for key in ("description", "url", "address"):
        values[key] = values[key] or ""
    values["photos"] = values.get("photos") or []

    if values["address"] and (values.get("latitude") is None or values.get("longitude") is None):
        coords = geocoder.geocode(values["address"])
        if coords is not None:
            values["latitude"], values["longitude"] = coords.lat, coords.lng

    if values["url"] and not values.get("scraped_content"):
        values["scraped_content"] = scraper.scrape(values["url"])

    listing = Listing(added_by=user_id, **values)
    db.add(listing)
    db.flush()

    phone = values.get("contact_phone")
    if phone:
        location = f" at {listing.address}" if listing.address else ""
        db.add(
            Todo(
                user_id=user_id,
                title=f"Call {listing.title} - {phone}",
                description=f"Follow up on listing: {listing.title}{location}",
                scheduled_at=datetime.now(UTC) + CALL_TODO_DELAY,
                duration_min=CALL_TODO_DURATION_MIN,
                link=listing.url or None,
            )
        )
        db.flush()

    logger.info(f"listings.create: id={listing.id} by={user_id}")
    return listing_to_dict(_load_listing(db, listing.id))


def update_listing(db: Session, listing_id: str, changes: dict[str, Any]) -> dict:
    listing = _load_listing(db, listing_id)
    for key, value in changes.items():
        if key not in _LISTING_COLUMNS:
            continue
        if key == "status" and value is not None:
            value = ListingStatus(value).value
        if key in ("description", "url", "address") and value is None:
            value = ""
        if key == "photos" and value is None:
            value = []
        setattr(listing, key, value)
    db.flush()
    return listing_to_dict(listing)


def delete_listing(db: Session, listing_id: str) -> None:
    listing = db.get(Listing, listing_id)
    if listing is None:
        raise ListingNotFoundError(listing_id)
    db.delete(listing)
    db.flush()


def select_listing(db: Session, listing_id: str) -> int:
    """Make one listing the household's choice.

    A single UPDATE marks the target SELECTED and archives every other
    listing that is still in play, so concurrent selections can never leave
    two listings selected. Rejected and archived listings keep their status.
    If the target row is gone the UPDATE touched only other listings, so the
    error raised here rolls the whole transaction back.
    """
    in_play = [status.value for status in ACTIVE_STATUSES]
    result = db.execute(
        update(Listing)
        .where((Listing.id == listing_id) | Listing.status.in_(in_play))
        .values(
            status=case(
                (Listing.id == listing_id, ListingStatus.SELECTED.value),
                else_=ListingStatus.ARCHIVED.value,
            )
        )
        .execution_options(synchronize_session=False)
    )
    target_status = db.scalar(select(Listing.status).where(Listing.id == listing_id))
    if target_status != ListingStatus.SELECTED.value:
        raise ListingNotFoundError(listing_id)
    archived = max(0, result.rowcount - 1)
    logger.info(f"listings.select: id={listing_id} archived={archived}")
    return archived


def reset_search(db: Session) -> int:
    result = db.execute(
        update(Listing)
        .where(Listing.status == ListingStatus.SELECTED.value)
        .values(status=ListingStatus.ARCHIVED.value)
        .execution_options(synchronize_session=False)
    )
    logger.info(f"listings.reset_search: archived={result.rowcount}")
    return result.rowcount


def add_listing_photos(
    db: Session, listing_id: str, uploads: list[PhotoUpload], storage: ObjectStorage
) -> list[str]:
    listing = db.get(Listing, listing_id)
    if listing is None:
        raise ListingNotFoundError(listing_id)
    urls = store_photos(storage, uploads, listing_id)
    discard_on_rollback(db, storage, urls)
    listing.photos = [*(listing.photos or []), *urls]
    db.flush()
    return list(listing.photos)


def upsert_score(db: Session, listing_id: str, user_id: str, changes: dict[str, Any]) -> dict:
    if db.get(Listing, listing_id) is None:
        raise ListingNotFoundError(listing_id)

    score = db.scalars(
        select(ListingScore).where(
            ListingScore.listing_id == listing_id, ListingScore.user_id == user_id
        )
    ).first()
    if score is None:
        score = ListingScore(listing_id=listing_id, user_id=user_id)
        db.add(score)

    if "ai_overall_score" in changes:
        score.ai_overall_score = validate_score(changes["ai_overall_score"], field="aiOverallScore")
        score.evaluated_at = datetime.now(UTC)
    if "ai_breakdown" in changes:
        score.ai_breakdown = changes["ai_breakdown"]
    if "ai_summary" in changes:
        score.ai_summary = changes["ai_summary"]
    if "manual_override_score" in changes:
        score.manual_override_score = validate_score(
            changes["manual_override_score"], field="manualOverrideScore"
        )
    db.flush()
    db.refresh(score)
    return score_to_dict(score)


def set_score_override(
    db: Session, listing_id: str, score_id: str, value: float | None
) -> dict:
    score = db.get(ListingScore, score_id)
    if score is None or score.listing_id != listing_id:
        raise ScoreNotFoundError(score_id)
    score.manual_override_score = validate_score(value, field="manualOverrideScore")
    db.flush()
    return score_to_dict(score)
