# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from nestfinder.infrastructure.db.models import AreaNote, DismissedArea
from nestfinder.services.serializers import iso, user_brief


def area_note_to_dict(note: AreaNote) -> dict:
    return {
        "id": note.id,
        "userId": note.user_id,
        "areaName": note.area_name,
        "liked": note.liked,
        "disliked": note.disliked,
        "updatedAt": iso(note.updated_at),
        "user": user_brief(note.user),
    }


def dismissed_area_to_dict(row: DismissedArea) -> dict:
    return {
        "id": row.id,
        "userId": row.user_id,
        "areaName": row.area_name,
        "reason": row.reason,
        "createdAt": iso(row.created_at),
        "user": user_brief(row.user),
    }


def list_area_notes(db: Session) -> list[dict]:
    rows = db.scalars(
        select(AreaNote).options(selectinload(AreaNote.user)).order_by(AreaNote.updated_at.desc())
    ).all()
    return [area_note_to_dict(row) for row in rows]


def save_area_note(
    db: Session, user_id: str, area_name: str, liked: str | None, disliked: str | None
) -> dict:
    note = db.scalars(
        select(AreaNote).where(AreaNote.user_id == user_id, AreaNote.area_name == area_name)
    ).first()
    if note is None:
        note = AreaNote(user_id=user_id, area_name=area_name)
        db.add(note)
    note.liked = liked
    note.disliked = disliked
    db.flush()
    db.refresh(note)
    return area_note_to_dict(note)


def list_dismissed_areas(db: Session) -> list[dict]:
    rows = db.scalars(
        select(DismissedArea)
        .options(selectinload(DismissedArea.user))
        .order_by(DismissedArea.created_at.desc())
    ).all()
    return [dismissed_area_to_dict(row) for row in rows]


def dismiss_area(db: Session, user_id: str, area_name: str, reason: str | None) -> dict:
    row = db.scalars(
        select(DismissedArea).where(
            DismissedArea.user_id == user_id, DismissedArea.area_name == area_name
        )
    ).first()
    if row is None:
        row = DismissedArea(user_id=user_id, area_name=area_name)
        db.add(row)
    row.reason = reason or None
    db.flush()
    db.refresh(row)
    return dismissed_area_to_dict(row)


def restore_area(db: Session, user_id: str, area_name: str) -> int:
    result = db.execute(
        delete(DismissedArea).where(
            DismissedArea.user_id == user_id, DismissedArea.area_name == area_name
        )
    )
    return result.rowcount
