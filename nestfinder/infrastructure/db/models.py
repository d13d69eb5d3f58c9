# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nestfinder.domain.listings import ListingStatus
from nestfinder.infrastructure.db.session import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class User(Base):
    __tablename__ = "users"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    username: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(128))
    display_name: Mapped[str] = mapped_column(String(128))
    is_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="0"
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, index=True)

    preferences: Mapped[UserPreferences | None] = relationship(
        "UserPreferences", back_populates="user", uselist=False, cascade="all,delete"
    )


class UserPreferences(Base):
    __tablename__ = "user_preferences"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, index=True
    )
    natural_light: Mapped[bool] = mapped_column(Boolean, default=False)
    bedrooms_min: Mapped[int] = mapped_column(Integer, default=1)
    bedrooms_max: Mapped[int] = mapped_column(Integer, default=2)
    outdoors_access: Mapped[bool] = mapped_column(Boolean, default=False)
    public_transport: Mapped[bool] = mapped_column(Boolean, default=False)
    budget_min: Mapped[int] = mapped_column(Integer, default=0)
    budget_max: Mapped[int] = mapped_column(Integer, default=0)
    pet_friendly: Mapped[bool] = mapped_column(Boolean, default=False)
    move_in_date_start: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    move_in_date_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    laundry_in_unit: Mapped[bool] = mapped_column(Boolean, default=False)
    parking: Mapped[bool] = mapped_column(Boolean, default=False)
    quiet_neighbourhood: Mapped[bool] = mapped_column(Boolean, default=False)
    modern_finishes: Mapped[bool] = mapped_column(Boolean, default=False)
    storage_space: Mapped[bool] = mapped_column(Boolean, default=False)
    gym_amenities: Mapped[bool] = mapped_column(Boolean, default=False)
    custom_desires: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    annual_salary: Mapped[float | None] = mapped_column(Float, nullable=True)
    onboarding_complete: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="0"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_now, onupdate=_now
    )

    user: Mapped[User] = relationship("User", back_populates="preferences")


class Listing(Base):
    __tablename__ = "listings"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    added_by: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(256))
    description: Mapped[str] = mapped_column(Text, default="")
    url: Mapped[str] = mapped_column(String(1024), default="")
    address: Mapped[str] = mapped_column(String(512), default="")
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    price: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bedrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    pet_friendly: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    square_feet: Mapped[int | None] = mapped_column(Integer, nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    parking: Mapped[str | None] = mapped_column(String(128), nullable=True)
    laundry: Mapped[str | None] = mapped_column(String(128), nullable=True)
    year_built: Mapped[int | None] = mapped_column(Integer, nullable=True)
    available_date: Mapped[str | None] = mapped_column(String(64), nullable=True)
    neighbourhood: Mapped[str | None] = mapped_column(String(128), nullable=True)
    photos: Mapped[list[str]] = mapped_column(JSON, default=list)
    scraped_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16), default=ListingStatus.ACTIVE.value, server_default="ACTIVE", index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_now, onupdate=_now
    )

    added_by_user: Mapped[User | None] = relationship("User")
    scores: Mapped[list[ListingScore]] = relationship(
        "ListingScore", back_populates="listing", cascade="all,delete-orphan"
    )
    viewings: Mapped[list[Viewing]] = relationship(
        "Viewing", back_populates="listing", cascade="all,delete-orphan"
    )


class ListingScore(Base):
    __tablename__ = "listing_scores"
    __table_args__ = (UniqueConstraint("listing_id", "user_id", name="u_listing_user_score"),)
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    listing_id: Mapped[str] = mapped_column(ForeignKey("listings.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    ai_overall_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    ai_breakdown: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    ai_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    manual_override_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    evaluated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

    listing: Mapped[Listing] = relationship("Listing", back_populates="scores")
    user: Mapped[User] = relationship("User")


class Viewing(Base):
    __tablename__ = "viewings"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    listing_id: Mapped[str] = mapped_column(ForeignKey("listings.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="SCHEDULED", server_default="SCHEDULED")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

    listing: Mapped[Listing] = relationship("Listing", back_populates="viewings")
    user: Mapped[User] = relationship("User")
    viewing_notes: Mapped[list[ViewingNote]] = relationship(
        "ViewingNote", back_populates="viewing", cascade="all,delete-orphan"
    )


class ViewingNote(Base):
    __tablename__ = "viewing_notes"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    viewing_id: Mapped[str] = mapped_column(ForeignKey("viewings.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(256))
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    photos: Mapped[list[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, index=True)

    viewing: Mapped[Viewing] = relationship("Viewing", back_populates="viewing_notes")


class AreaNote(Base):
    __tablename__ = "area_notes"
    __table_args__ = (UniqueConstraint("user_id", "area_name", name="u_user_area_note"),)
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    area_name: Mapped[str] = mapped_column(String(128))
    liked: Mapped[str | None] = mapped_column(Text, nullable=True)
    disliked: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_now, onupdate=_now, index=True
    )

    user: Mapped[User] = relationship("User")


class DismissedArea(Base):
    __tablename__ = "dismissed_areas"
    __table_args__ = (UniqueConstraint("user_id", "area_name", name="u_user_dismissed_area"),)
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    area_name: Mapped[str] = mapped_column(String(128))
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, index=True)

    user: Mapped[User] = relationship("User")


class Todo(Base):
    __tablename__ = "todos"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(256))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    duration_min: Mapped[int] = mapped_column(Integer, default=30)
    location: Mapped[str | None] = mapped_column(String(512), nullable=True)
    link: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

    user: Mapped[User] = relationship("User")


class AuditLog(Base):
    __tablename__ = "audit_logs"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, index=True)
    action: Mapped[str] = mapped_column(String(64), index=True)
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    success: Mapped[bool] = mapped_column(Boolean, index=True)
    details_json: Mapped[str | None] = mapped_column(String(2048), nullable=True)
