"""
HTTP tests for the shopping list endpoints.
"""
import pytest
from fastapi.testclient import TestClient

from db.models import Base
from db.session import get_session
from main import app

BASE = "/shopping-list"

MEAL_PLAN = {
    "2026-10-19": {
        "breakfast": [
            {
                "id": 101,
                "name": "Omelette",
                "ingredients": [
                    {"id": 1, "name": "egg", "amount": "2", "unit": "", "aisle": None},
                    {"id": 2, "name": "spinach", "amount": 1, "unit": "cups", "aisle": "Produce;Vegetables"},
                ],
            }
        ],
        "dinner": [{"id": 102, "name": "Takeout Night"}],
    },
    "2026-10-20": {
        "breakfast": [
            {
                "id": 103,
                "name": "Egg Muffin",
                "ingredients": [
                    {"name": "Egg", "amount": 1, "unit": None},
                    {"name": "spinach", "amount": "1/2", "unit": "cup"},
                ],
            }
        ]
    },
}


@pytest.fixture
def client(session_factory):
    """TestClient bound to the in-memory database."""

    def override_get_session():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_session] = override_get_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def generate(client, **params):
    response = client.post(
        f"{BASE}/generate",
        json={"meals": MEAL_PLAN, "days_ahead": 7, "today": "2026-10-21"},
        params=params,
    )
    assert response.status_code == 200, response.text
    return response.json()


def item_named(payload, name):
    return next(item for item in payload["items"] if item["name"] == name)


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestGenerateEndpoint:
    """Test list generation over HTTP."""

    def test_empty_list_before_generation(self, client):
        response = client.get(f"{BASE}/")
        assert response.status_code == 200
        assert response.json() == {"items": [], "last_generated": None, "total": 0, "checked": 0}

    def test_generate(self, client):
        payload = generate(client)

        assert [i["name"] for i in payload["items"]] == ["spinach", "egg"]
        assert payload["total"] == 2
        assert payload["checked"] == 0
        assert payload["last_generated"] is not None

        egg = item_named(payload, "egg")
        assert egg["amount"] == 3
        assert egg["aisle"] == "dairy"
        assert egg["source_recipes"] == ["Omelette", "Egg Muffin"]

        spinach = item_named(payload, "spinach")
        assert spinach["unit"] == "cup"
        assert spinach["amount"] == pytest.approx(1.5)
        assert spinach["aisle"] == "produce"

    def test_generated_list_is_persisted(self, client):
        generate(client)
        response = client.get(f"{BASE}/")
        assert response.json()["total"] == 2

    def test_generate_with_empty_plan(self, client):
        response = client.post(f"{BASE}/generate", json={"meals": {}})
        assert response.status_code == 200
        body = response.json()
        assert body["items"] == []
        assert body["last_generated"] is not None

    def test_generate_rejects_negative_days(self, client):
        response = client.post(f"{BASE}/generate", json={"meals": {}, "days_ahead": -1})
        assert response.status_code == 422


class TestChecklistEndpoints:
    """Test toggle/add/delete/clear over HTTP."""

    def test_toggle(self, client):
        egg_id = item_named(generate(client), "egg")["id"]

        response = client.post(f"{BASE}/items/{egg_id}/toggle")
        assert response.status_code == 200
        assert item_named(response.json(), "egg")["checked"] is True
        assert response.json()["checked"] == 1

    def test_toggle_unknown_id_is_noop(self, client):
        before = generate(client)
        response = client.post(f"{BASE}/items/does-not-exist/toggle")
        assert response.status_code == 200
        assert response.json()["items"] == before["items"]

    def test_regenerate_resets_checked(self, client):
        egg_id = item_named(generate(client), "egg")["id"]
        client.post(f"{BASE}/items/{egg_id}/toggle")

        regenerated = generate(client)
        assert regenerated["checked"] == 0
        assert item_named(regenerated, "egg")["checked"] is False

    def test_add_item(self, client):
        generate(client)
        response = client.post(f"{BASE}/items", json={"name": "Egg"})
        assert response.status_code == 200

        body = response.json()
        assert body["total"] == 3
        manual = body["items"][-1]
        assert manual["name"] == "Egg"
        assert manual["unit"] == "item"
        assert manual["aisle"] == "other"
        assert manual["source_recipes"] == ["Manual"]

    def test_add_item_requires_name(self, client):
        response = client.post(f"{BASE}/items", json={"name": ""})
        assert response.status_code == 422

    def test_add_item_rejects_blank_name(self, client):
        response = client.post(f"{BASE}/items", json={"name": "   "})
        assert response.status_code == 422
        assert client.get(f"{BASE}/").json()["total"] == 0

    def test_delete_item(self, client):
        spinach_id = item_named(generate(client), "spinach")["id"]

        response = client.delete(f"{BASE}/items/{spinach_id}")
        assert response.status_code == 200
        assert [i["name"] for i in response.json()["items"]] == ["egg"]

        response = client.delete(f"{BASE}/items/{spinach_id}")
        assert response.status_code == 200
        assert response.json()["total"] == 1

    def test_clear_list(self, client):
        generate(client)
        response = client.delete(f"{BASE}/")
        assert response.status_code == 200
        assert response.json() == {"items": [], "last_generated": None, "total": 0, "checked": 0}

    def test_households_are_isolated(self, client):
        generate(client, household="smiths")
        client.post(f"{BASE}/items", json={"name": "coffee"}, params={"household": "joneses"})

        smiths = client.get(f"{BASE}/", params={"household": "smiths"}).json()
        joneses = client.get(f"{BASE}/", params={"household": "joneses"}).json()
        default = client.get(f"{BASE}/").json()

        assert smiths["total"] == 2
        assert [i["name"] for i in joneses["items"]] == ["coffee"]
        assert default["total"] == 0


class TestPresentationEndpoints:
    """Test grouping, export and reference data."""

    def test_groups(self, client):
        generate(client)
        client.post(f"{BASE}/items", json={"name": "batteries"})

        response = client.get(f"{BASE}/groups")
        assert response.status_code == 200
        groups = response.json()
        assert [g["id"] for g in groups] == ["produce", "dairy", "other"]
        assert groups[1]["name"] == "Dairy & Eggs"
        assert [i["name"] for i in groups[2]["items"]] == ["batteries"]

    def test_export(self, client):
        egg_id = item_named(generate(client), "egg")["id"]
        client.post(f"{BASE}/items/{egg_id}/toggle")

        response = client.get(f"{BASE}/export")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == (
            "🥬 Produce\n"
            "- [ ] 1.5 cup spinach\n"
            "\n"
            "🥛 Dairy & Eggs\n"
            "- [x] 3 egg"
        )

    def test_aisles(self, client):
        response = client.get(f"{BASE}/aisles")
        assert response.status_code == 200
        aisles = response.json()
        assert aisles[0] == {"id": "produce", "name": "Produce", "icon": "🥬", "order": 1}
        assert aisles[-1]["id"] == "other"

    def test_ingredient_suggestions(self, client):
        response = client.get(f"{BASE}/ingredients", params={"query": "chicken"})
        assert response.status_code == 200
        assert [s["name"] for s in response.json()] == ["chicken", "chicken breast", "chicken thigh"]
        assert all(s["aisle"] == "meat" for s in response.json())


class TestDatabaseErrors:
    """Persistence failures surface as 500s with the failing operation named."""

    def test_load_failure(self, client, engine):
        Base.metadata.drop_all(engine)

        response = client.get(f"{BASE}/")
        assert response.status_code == 500
        assert response.json()["detail"] == "Database error during load shopping list"

    def test_save_failure(self, client, engine):
        generate(client)

        with engine.begin() as conn:
            conn.exec_driver_sql(
                "CREATE TRIGGER reject_updates BEFORE UPDATE ON shopping_lists "
                "BEGIN SELECT RAISE(ABORT, 'read-only'); END"
            )

        response = client.post(f"{BASE}/items", json={"name": "milk"})
        assert response.status_code == 500
        assert response.json()["detail"] == "Database error during add shopping list item"
