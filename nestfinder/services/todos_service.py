# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from nestfinder.infrastructure.db.models import Todo
from nestfinder.services.serializers import iso, user_brief
from nestfinder.shared.errors.base import TodoNotFoundError

_OPTIONAL_TEXT = ("description", "location", "link")


def todo_to_dict(todo: Todo) -> dict:
    return {
        "id": todo.id,
        "userId": todo.user_id,
        "title": todo.title,
        "description": todo.description,
        "scheduledAt": iso(todo.scheduled_at),
        "durationMin": todo.duration_min,
        "location": todo.location,
        "link": todo.link,
        "completed": todo.completed,
        "createdAt": iso(todo.created_at),
        "user": user_brief(todo.user),
    }


def list_todos(db: Session) -> list[dict]:
    rows = db.scalars(
        select(Todo).options(selectinload(Todo.user)).order_by(Todo.scheduled_at.asc())
    ).all()
    return [todo_to_dict(row) for row in rows]


def create_todo(db: Session, user_id: str, fields: dict[str, Any]) -> dict:
    todo = Todo(
        user_id=user_id,
        title=fields["title"],
        scheduled_at=fields["scheduled_at"],
        duration_min=fields.get("duration_min") or 30,
        completed=False,
        **{key: fields.get(key) or None for key in _OPTIONAL_TEXT},
    )
    db.add(todo)
    db.flush()
    return todo_to_dict(todo)


def update_todo(db: Session, todo_id: str, changes: dict[str, Any]) -> dict:
    todo = db.get(Todo, todo_id)
    if todo is None:
        raise TodoNotFoundError(todo_id)
    if "title" in changes:
        todo.title = changes["title"]
    for key in _OPTIONAL_TEXT:
        if key in changes:
            setattr(todo, key, changes[key] or None)
    if changes.get("scheduled_at"):
        todo.scheduled_at = changes["scheduled_at"]
    if changes.get("duration_min") is not None:
        todo.duration_min = changes["duration_min"]
    if changes.get("completed") is not None:
        todo.completed = changes["completed"]
    db.flush()
    return todo_to_dict(todo)


def delete_todo(db: Session, todo_id: str) -> None:
    todo = db.get(Todo, todo_id)
    if todo is None:
        raise TodoNotFoundError(todo_id)
    db.delete(todo)
    db.flush()
