# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from nestfinder.domain.budget import (
    calculate_affordable_rent,
    calculate_take_home,
    combined_monthly_take_home,
)
from nestfinder.infrastructure.db.models import User, UserPreferences
from nestfinder.services.serializers import iso
from nestfinder.shared.logging import logger

_PREFERENCE_FIELDS = {
    "natural_light": "naturalLight",
    "bedrooms_min": "bedroomsMin",
    "bedrooms_max": "bedroomsMax",
    "outdoors_access": "outdoorsAccess",
    "public_transport": "publicTransport",
    "budget_min": "budgetMin",
    "budget_max": "budgetMax",
    "pet_friendly": "petFriendly",
    "laundry_in_unit": "laundryInUnit",
    "parking": "parking",
    "quiet_neighbourhood": "quietNeighbourhood",
    "modern_finishes": "modernFinishes",
    "storage_space": "storageSpace",
    "gym_amenities": "gymAmenities",
    "custom_desires": "customDesires",
    "annual_salary": "annualSalary",
    "onboarding_complete": "onboardingComplete",
}


def preferences_to_dict(prefs: UserPreferences | None) -> dict | None:
    if prefs is None:
        return None
    data: dict[str, Any] = {"id": prefs.id, "userId": prefs.user_id}
    for attr, key in _PREFERENCE_FIELDS.items():
        data[key] = getattr(prefs, attr)
    data["customDesires"] = list(prefs.custom_desires or [])
    data["moveInDateStart"] = iso(prefs.move_in_date_start)
    data["moveInDateEnd"] = iso(prefs.move_in_date_end)
    return data


def _find(db: Session, user_id: str) -> UserPreferences | None:
    return db.scalars(select(UserPreferences).where(UserPreferences.user_id == user_id)).first()


def get_preferences(db: Session, user_id: str) -> dict | None:
    return preferences_to_dict(_find(db, user_id))


def save_preferences(db: Session, user_id: str, values: dict[str, Any]) -> dict:
    """Upsert the caller's preferences; saving them completes onboarding."""
    prefs = _find(db, user_id)
    if prefs is None:
        prefs = UserPreferences(user_id=user_id)
        db.add(prefs)
    for key, value in values.items():
        if key in _PREFERENCE_FIELDS or key in ("move_in_date_start", "move_in_date_end"):
            setattr(prefs, key, value)
    prefs.onboarding_complete = True
    db.flush()
    logger.info(f"preferences.save: user_id={user_id}")
    return preferences_to_dict(prefs)


def budget_overview(db: Session) -> dict:
    users = db.scalars(
        select(User).options(selectinload(User.preferences)).order_by(User.created_at)
    ).all()
    members = []
    salaries = []
    for user in users:
        prefs = user.preferences
        salary = prefs.annual_salary if prefs else None
        salaries.append(salary)
        take_home = calculate_take_home(salary) if salary else None
        members.append(
            {
                "id": user.id,
                "displayName": user.display_name,
                "preferences": {
                    "annualSalary": salary,
                    "budgetMin": prefs.budget_min,
                    "budgetMax": prefs.budget_max,
                }
                if prefs
                else None,
                "takeHome": {
                    "federalTax": take_home.federal_tax,
                    "provincialTax": take_home.provincial_tax,
                    "totalTax": take_home.total_tax,
                    "annualTakeHome": take_home.annual_take_home,
                    "monthlyTakeHome": take_home.monthly_take_home,
                }
                if take_home
                else None,
            }
        )
    combined = combined_monthly_take_home(salaries)
    return {
        "users": members,
        "combinedMonthlyTakeHome": combined,
        "affordableRent": calculate_affordable_rent(combined),
    }


def set_annual_salary(db: Session, user_id: str, salary: float | None) -> dict:
    prefs = _find(db, user_id)
    if prefs is None:
        prefs = UserPreferences(user_id=user_id)
        db.add(prefs)
    prefs.annual_salary = salary
    db.flush()
    return preferences_to_dict(prefs)
