"""
Tests for the kitchen polling endpoint.
"""

from shared.config.settings import settings
from tests.conftest import BEER_ID, BURGER_ID


def _mixed_order(client, headers):
    return client.post(
        "/api/orders",
        json={
            "table_id": 1,
            "items": [
                {"product_id": BURGER_ID, "quantity": 1, "notes": "sin cebolla"},
                {"product_id": BEER_ID, "quantity": 2},
            ],
        },
        headers=headers,
    ).json()


def test_pending_defaults_to_all(client, floor, waiter_headers, cook_headers):
    order = _mixed_order(client, waiter_headers)

    response = client.get("/api/kitchen/pending", headers=cook_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["category"] == "all"
    assert data["refresh_seconds"] == settings.kitchen_refresh_seconds
    assert [o["order_id"] for o in data["orders"]] == [order["id"]]
    entry = data["orders"][0]
    assert entry["table_number"] == 1
    assert entry["urgency"] == "normal"
    assert len(entry["items"]) == 2


def test_food_and_drink_split(client, floor, waiter_headers, cook_headers):
    _mixed_order(client, waiter_headers)

    food = client.get("/api/kitchen/pending?category=food", headers=cook_headers).json()
    drink = client.get("/api/kitchen/pending?category=drink", headers=cook_headers).json()

    assert [i["product_name"] for i in food["orders"][0]["items"]] == ["Hamburguesa"]
    assert food["orders"][0]["items"][0]["notes"] == "sin cebolla"
    assert [i["product_name"] for i in drink["orders"][0]["items"]] == ["Cerveza"]


def test_empty_queue(client, floor, cook_headers):
    response = client.get("/api/kitchen/pending", headers=cook_headers)

    assert response.json()["orders"] == []


def test_invalid_category_rejected(client, floor, cook_headers):
    response = client.get("/api/kitchen/pending?category=dessert", headers=cook_headers)
    assert response.status_code == 422


def test_requires_token(client, floor):
    assert client.get("/api/kitchen/pending").status_code == 401
