from __future__ import annotations

from flask.testing import FlaskClient

from nestfinder.domain.users.entities import User

PREFERENCES = {
    "naturalLight": True,
    "bedroomsMin": 1,
    "bedroomsMax": 2,
    "budgetMin": 1800,
    "budgetMax": 3000,
    "petFriendly": True,
    "moveInDateStart": "2026-05-01T00:00:00Z",
    "customDesires": [{"label": "Balcony", "enabled": True}],
}


def test_save_preferences_completes_onboarding(member_client: FlaskClient) -> None:
    response = member_client.put("/api/preferences", json=PREFERENCES)

    assert response.status_code == 200
    prefs = response.get_json()["preferences"]
    assert prefs["budgetMax"] == 3000
    assert prefs["onboardingComplete"] is True
    assert prefs["customDesires"] == [{"label": "Balcony", "enabled": True}]
    assert prefs["moveInDateStart"].startswith("2026-05-01")

    assert member_client.get("/api/preferences").get_json()["preferences"]["id"] == prefs["id"]
    assert member_client.get("/api/auth/me").get_json()["user"]["onboardingComplete"] is True


def test_preferences_validate_ranges(member_client: FlaskClient) -> None:
    budget = member_client.put("/api/preferences", json={**PREFERENCES, "budgetMin": 4000})
    bedrooms = member_client.put("/api/preferences", json={**PREFERENCES, "bedroomsMin": 3})

    assert budget.status_code == 400
    assert budget.get_json()["error"] == "budgetMin must be <= budgetMax"
    assert bedrooms.status_code == 400
    assert bedrooms.get_json()["error"] == "bedroomsMin must be <= bedroomsMax"


def test_preferences_require_budget(member_client: FlaskClient) -> None:
    payload = {key: value for key, value in PREFERENCES.items() if key != "budgetMax"}

    assert member_client.put("/api/preferences", json=payload).status_code == 400


def test_budget_overview(
    admin_client: FlaskClient, member_client: FlaskClient, member_user: User
) -> None:
    assert admin_client.put("/api/budget", json={"annualSalary": None}).status_code == 200
    assert member_client.put("/api/budget", json={"annualSalary": 100000}).status_code == 200

    budget = member_client.get("/api/budget").get_json()

    zoey = next(u for u in budget["users"] if u["id"] == member_user.id)
    assert zoey["preferences"]["annualSalary"] == 100000
    assert zoey["takeHome"]["monthlyTakeHome"] == 6597
    assert budget["combinedMonthlyTakeHome"] == 6597
    assert budget["affordableRent"] == 1979


def test_budget_rejects_non_numbers(member_client: FlaskClient) -> None:
    response = member_client.put("/api/budget", json={"annualSalary": "lots"})

    assert response.status_code == 400
    assert response.get_json()["error"] == "annualSalary must be a number"


def test_area_notes_upsert_per_user(
    member_client: FlaskClient, admin_client: FlaskClient
) -> None:
    member_client.put("/api/area-notes", json={"areaName": "Kitsilano", "liked": "beach"})
    member_client.put(
        "/api/area-notes", json={"areaName": "Kitsilano", "liked": "beach", "disliked": "parking"}
    )
    admin_client.put("/api/area-notes", json={"areaName": "Kitsilano", "liked": "cafes"})

    notes = [
        n for n in member_client.get("/api/area-notes").get_json()["areaNotes"]
        if n["areaName"] == "Kitsilano"
    ]

    assert len(notes) == 2
    zoey = next(n for n in notes if n["user"]["displayName"] == "Zoey")
    assert zoey["disliked"] == "parking"


def test_area_note_requires_name(member_client: FlaskClient) -> None:
    response = member_client.put("/api/area-notes", json={"areaName": " "})

    assert response.status_code == 400
    assert response.get_json()["error"] == "areaName is required"


def test_dismiss_and_restore_area(member_client: FlaskClient) -> None:
    first = member_client.post("/api/dismissed-areas", json={"areaName": "Surrey", "reason": "far"})
    again = member_client.post("/api/dismissed-areas", json={"areaName": "Surrey"})

    assert first.status_code == 201
    assert again.get_json()["dismissedArea"]["id"] == first.get_json()["dismissedArea"]["id"]
    dismissed = member_client.get("/api/dismissed-areas").get_json()["dismissedAreas"]
    assert [d["areaName"] for d in dismissed].count("Surrey") == 1

    assert member_client.delete("/api/dismissed-areas", json={"areaName": "Surrey"}).status_code == 200
    dismissed = member_client.get("/api/dismissed-areas").get_json()["dismissedAreas"]
    assert "Surrey" not in [d["areaName"] for d in dismissed]


def test_todo_lifecycle(member_client: FlaskClient) -> None:
    created = member_client.post(
        "/api/todos", json={"title": "Book movers", "scheduledAt": "2026-04-01T09:00:00Z"}
    )
    assert created.status_code == 201
    todo = created.get_json()["todo"]
    assert todo["durationMin"] == 30
    assert todo["completed"] is False

    updated = member_client.put(f"/api/todos/{todo['id']}", json={"completed": True})
    assert updated.get_json()["todo"]["completed"] is True
    assert updated.get_json()["todo"]["title"] == "Book movers"

    assert member_client.delete(f"/api/todos/{todo['id']}").status_code == 200
    assert member_client.delete(f"/api/todos/{todo['id']}").status_code == 404


def test_todo_requires_title_and_time(member_client: FlaskClient) -> None:
    no_time = member_client.post("/api/todos", json={"title": "Pack"})
    no_title = member_client.post("/api/todos", json={"scheduledAt": "2026-04-01T09:00:00Z"})

    assert no_time.status_code == 400
    assert no_title.status_code == 400
