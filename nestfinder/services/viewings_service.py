# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from nestfinder.infrastructure.db.models import Listing, Viewing, ViewingNote
from nestfinder.infrastructure.storage import ObjectStorage
from nestfinder.services.photos_service import PhotoUpload, discard_on_rollback, store_photos
from nestfinder.services.serializers import iso, user_brief
from nestfinder.shared.errors.base import (
    ListingNotFoundError,
    NoteNotFoundError,
    ViewingNotFoundError,
)
from nestfinder.shared.logging import logger


def _listing_brief(listing: Listing | None) -> dict | None:
    if listing is None:
        return None
    return {
        "id": listing.id,
        "title": listing.title,
        "address": listing.address,
        "price": listing.price,
        "url": listing.url,
    }


def viewing_to_dict(viewing: Viewing) -> dict:
    return {
        "id": viewing.id,
        "listingId": viewing.listing_id,
        "userId": viewing.user_id,
        "scheduledAt": iso(viewing.scheduled_at),
        "notes": viewing.notes,
        "status": viewing.status,
        "createdAt": iso(viewing.created_at),
        "listing": _listing_brief(viewing.listing),
        "user": user_brief(viewing.user),
    }


def note_to_dict(note: ViewingNote) -> dict:
    return {
        "id": note.id,
        "viewingId": note.viewing_id,
        "title": note.title,
        "notes": note.notes,
        "photos": list(note.photos or []),
        "createdAt": iso(note.created_at),
    }


def _get_viewing(db: Session, viewing_id: str) -> Viewing:
    viewing = db.get(Viewing, viewing_id)
    if viewing is None:
        raise ViewingNotFoundError(viewing_id)
    return viewing


def _get_note(db: Session, viewing_id: str, note_id: str) -> ViewingNote:
    note = db.get(ViewingNote, note_id)
    if note is None or note.viewing_id != viewing_id:
        raise NoteNotFoundError(note_id)
    return note


def _ensure_listing(db: Session, listing_id: str) -> None:
    if db.get(Listing, listing_id) is None:
        raise ListingNotFoundError(listing_id)


def list_viewings(db: Session) -> list[dict]:
    rows = db.scalars(
        select(Viewing)
        .options(selectinload(Viewing.listing), selectinload(Viewing.user))
        .order_by(Viewing.scheduled_at.asc())
    ).all()
    return [viewing_to_dict(row) for row in rows]


def create_viewing(db: Session, user_id: str, fields: dict[str, Any]) -> dict:
    _ensure_listing(db, fields["listing_id"])
    viewing = Viewing(
        listing_id=fields["listing_id"],
        user_id=user_id,
        scheduled_at=fields["scheduled_at"],
        notes=fields.get("notes") or None,
    )
    db.add(viewing)
    db.flush()
    logger.info(f"viewings.create: id={viewing.id} listing={viewing.listing_id}")
    return viewing_to_dict(viewing)


def update_viewing(db: Session, viewing_id: str, changes: dict[str, Any]) -> dict:
    viewing = _get_viewing(db, viewing_id)
    if changes.get("listing_id"):
        _ensure_listing(db, changes["listing_id"])
        viewing.listing_id = changes["listing_id"]
    if changes.get("scheduled_at"):
        viewing.scheduled_at = changes["scheduled_at"]
    if "notes" in changes:
        viewing.notes = changes["notes"] or None
    if changes.get("status"):
        viewing.status = changes["status"]
    db.flush()
    db.refresh(viewing)
    return viewing_to_dict(viewing)


def delete_viewing(db: Session, viewing_id: str) -> None:
    db.delete(_get_viewing(db, viewing_id))
    db.flush()


def list_notes(db: Session, viewing_id: str) -> list[dict]:
    _get_viewing(db, viewing_id)
    rows = db.scalars(
        select(ViewingNote)
        .where(ViewingNote.viewing_id == viewing_id)
        .order_by(ViewingNote.created_at.asc())
    ).all()
    return [note_to_dict(row) for row in rows]


def create_note(db: Session, viewing_id: str, fields: dict[str, Any]) -> dict:
    _get_viewing(db, viewing_id)
    note = ViewingNote(
        viewing_id=viewing_id,
        title=fields["title"],
        notes=fields.get("notes") or None,
        photos=[],
    )
    db.add(note)
    db.flush()
    return note_to_dict(note)


def update_note(db: Session, viewing_id: str, note_id: str, changes: dict[str, Any]) -> dict:
    note = _get_note(db, viewing_id, note_id)
    if "title" in changes:
        note.title = changes["title"]
    if "notes" in changes:
        note.notes = changes["notes"] or None
    db.flush()
    return note_to_dict(note)


def delete_note(db: Session, viewing_id: str, note_id: str) -> None:
    db.delete(_get_note(db, viewing_id, note_id))
    db.flush()


def add_note_photos(
    db: Session,
    viewing_id: str,
    note_id: str,
    uploads: list[PhotoUpload],
    storage: ObjectStorage,
) -> list[str]:
    note = _get_note(db, viewing_id, note_id)
    urls = store_photos(storage, uploads, f"viewing-notes/{viewing_id}/{note_id}")
    discard_on_rollback(db, storage, urls)
    note.photos = [*(note.photos or []), *urls]
    db.flush()
    return list(note.photos)
