"""
Tests for the orders API: creation, status changes and role checks.
"""

from unittest.mock import patch

from shared.config.constants import Roles
from tests.conftest import BEER_ID, BURGER_ID, PIZZA_ID, WAITER_ID, make_auth_headers


def _create(client, headers, table_id=3, items=None):
    if items is None:
        items = [{"product_id": BURGER_ID, "quantity": 2}]
    return client.post("/api/orders", json={"table_id": table_id, "items": items}, headers=headers)


def _set_status(client, headers, order_id, status, **extra):
    return client.patch(
        f"/api/orders/{order_id}/status", json={"status": status, **extra}, headers=headers
    )


class TestCreateOrder:
    def test_waiter_creates_order(self, client, floor, waiter_headers):
        response = _create(client, waiter_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["table_id"] == 3
        assert data["staff_id"] == WAITER_ID
        assert data["staff_name"] == "Juan Pérez"
        assert data["status"] == "pending"
        assert data["preparation_status"] == "pending"
        assert data["total_cents"] == 3000
        assert data["items"][0]["subtotal_cents"] == 3000
        assert data["items"][0]["category"] == "Plato"

        products = client.get("/api/products", headers=waiter_headers).json()
        burger = next(p for p in products if p["id"] == BURGER_ID)
        assert burger["stock_actual"] == 18

        tables = client.get("/api/tables", headers=waiter_headers).json()
        table = next(t for t in tables if t["id"] == 3)
        assert table["status"] == "occupied"
        assert table["open_orders"] == 1

    def test_insufficient_stock_returns_400(self, client, floor, waiter_headers):
        response = _create(
            client,
            waiter_headers,
            items=[
                {"product_id": BEER_ID, "quantity": 1},
                {"product_id": PIZZA_ID, "quantity": 10},
            ],
        )

        assert response.status_code == 400
        assert "Pizza" in response.json()["detail"]
        assert client.get("/api/orders", headers=waiter_headers).json() == []

    def test_unknown_product_returns_400(self, client, floor, waiter_headers):
        response = _create(client, waiter_headers, items=[{"product_id": 999, "quantity": 1}])
        assert response.status_code == 400

    def test_unknown_table_returns_404(self, client, floor, waiter_headers):
        response = _create(client, waiter_headers, table_id=99)
        assert response.status_code == 404

    def test_empty_items_rejected(self, client, floor, waiter_headers):
        response = _create(client, waiter_headers, items=[])
        assert response.status_code == 422
        assert client.get("/api/orders", headers=waiter_headers).json() == []

    def test_quantity_out_of_range_rejected(self, client, floor, waiter_headers):
        response = _create(client, waiter_headers, items=[{"product_id": BURGER_ID, "quantity": 0}])
        assert response.status_code == 422

    def test_cook_cannot_create_orders(self, client, floor, cook_headers):
        response = _create(client, cook_headers)
        assert response.status_code == 403

    def test_missing_token_returns_401(self, client, floor):
        response = client.post(
            "/api/orders", json={"table_id": 3, "items": [{"product_id": BURGER_ID, "quantity": 1}]}
        )
        assert response.status_code == 401

    def test_non_json_body_returns_415(self, client, floor, waiter_headers):
        response = client.post(
            "/api/orders",
            content="table_id=3",
            headers={**waiter_headers, "Content-Type": "application/x-www-form-urlencoded"},
        )
        assert response.status_code == 415

    def test_table_event_only_when_table_opens(self, client, floor, waiter_headers):
        with patch("rest_api.routers.orders.routes.schedule_table_event") as mock_schedule:
            _create(client, waiter_headers)
            _create(client, waiter_headers, items=[{"product_id": BEER_ID, "quantity": 1}])

        assert mock_schedule.call_count == 1
        assert mock_schedule.call_args.args[1].id == 3


class TestQueries:
    def test_list_and_filter(self, client, floor, waiter_headers, cook_headers):
        first = _create(client, waiter_headers, table_id=1).json()
        second = _create(client, waiter_headers, table_id=2).json()
        _set_status(client, cook_headers, second["id"], "in_preparation")

        everything = client.get("/api/orders", headers=cook_headers).json()
        pending = client.get("/api/orders?status=pending", headers=cook_headers).json()

        assert {o["id"] for o in everything} == {first["id"], second["id"]}
        assert [o["id"] for o in pending] == [first["id"]]

    def test_unknown_status_filter_rejected(self, client, floor, waiter_headers):
        response = client.get("/api/orders?status=lost", headers=waiter_headers)
        assert response.status_code == 422

    def test_get_order(self, client, floor, waiter_headers):
        order = _create(client, waiter_headers).json()

        response = client.get(f"/api/orders/{order['id']}", headers=waiter_headers)

        assert response.status_code == 200
        assert response.json()["id"] == order["id"]

    def test_get_missing_order(self, client, floor, waiter_headers):
        assert client.get("/api/orders/4040", headers=waiter_headers).status_code == 404


class TestOrderStatus:
    def test_full_flow_to_payment_frees_table(self, client, floor, waiter_headers, cook_headers):
        order = _create(client, waiter_headers).json()

        assert _set_status(client, cook_headers, order["id"], "in_preparation").status_code == 200
        assert _set_status(client, cook_headers, order["id"], "ready").status_code == 200
        delivered = _set_status(client, waiter_headers, order["id"], "delivered")
        assert delivered.json()["delivered_at"] is not None

        paid = _set_status(client, waiter_headers, order["id"], "paid", payment_method="tarjeta")

        assert paid.status_code == 200
        assert paid.json()["status"] == "paid"
        assert paid.json()["payment_method"] == "tarjeta"
        tables = client.get("/api/tables", headers=waiter_headers).json()
        assert next(t for t in tables if t["id"] == 3)["status"] == "free"

    def test_invalid_transition_returns_400(self, client, floor, waiter_headers):
        order = _create(client, waiter_headers).json()

        response = _set_status(client, waiter_headers, order["id"], "paid")

        assert response.status_code == 400
        assert "pending" in response.json()["detail"]

    def test_cook_cannot_cancel_order(self, client, floor, waiter_headers, cook_headers):
        order = _create(client, waiter_headers).json()

        response = _set_status(client, cook_headers, order["id"], "cancelled")

        assert response.status_code == 403

    def test_cancel_returns_stock(self, client, floor, waiter_headers):
        order = _create(client, waiter_headers).json()

        response = _set_status(client, waiter_headers, order["id"], "cancelled")

        assert response.json()["total_cents"] == 0
        assert response.json()["preparation_status"] is None
        products = client.get("/api/products", headers=waiter_headers).json()
        assert next(p for p in products if p["id"] == BURGER_ID)["stock_actual"] == 20

    def test_token_without_roles_is_forbidden(self, client, floor):
        headers = make_auth_headers(WAITER_ID)
        response = _create(client, headers)
        assert response.status_code == 403


class TestLineItemStatus:
    def test_kitchen_moves_items(self, client, floor, waiter_headers, cook_headers):
        order = _create(client, waiter_headers).json()
        item_id = order["items"][0]["id"]
        url = f"/api/orders/{order['id']}/items/{item_id}/status"

        assert client.patch(url, json={"status": "in_preparation"}, headers=cook_headers).status_code == 200
        response = client.patch(url, json={"status": "ready"}, headers=cook_headers)

        assert response.status_code == 200
        assert response.json()["id"] == item_id
        assert response.json()["status"] == "ready"
        data = client.get(f"/api/orders/{order['id']}", headers=cook_headers).json()
        assert data["preparation_status"] == "ready"
        # Explicit order status is untouched
        assert data["status"] == "pending"

    def test_waiter_cannot_mark_ready(self, client, floor, waiter_headers):
        order = _create(client, waiter_headers).json()
        item_id = order["items"][0]["id"]

        response = client.patch(
            f"/api/orders/{order['id']}/items/{item_id}/status",
            json={"status": "in_preparation"},
            headers=waiter_headers,
        )

        assert response.status_code == 403

    def test_admin_may_do_kitchen_work(self, client, floor, waiter_headers, admin_headers):
        order = _create(client, waiter_headers).json()
        item_id = order["items"][0]["id"]

        response = client.patch(
            f"/api/orders/{order['id']}/items/{item_id}/status",
            json={"status": "in_preparation"},
            headers=admin_headers,
        )

        assert response.status_code == 200

    def test_cancel_item_recomputes_total(self, client, floor, waiter_headers):
        order = _create(
            client,
            waiter_headers,
            items=[
                {"product_id": BURGER_ID, "quantity": 2},
                {"product_id": BEER_ID, "quantity": 2},
            ],
        ).json()
        assert order["total_cents"] == 4000
        beer_item = order["items"][1]["id"]

        response = client.patch(
            f"/api/orders/{order['id']}/items/{beer_item}/status",
            json={"status": "cancelled"},
            headers=waiter_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert response.json()["subtotal_cents"] == 1000
        current = client.get(f"/api/orders/{order['id']}", headers=waiter_headers).json()
        assert current["total_cents"] == 3000

    def test_missing_item_returns_404(self, client, floor, waiter_headers, cook_headers):
        order = _create(client, waiter_headers).json()

        response = client.patch(
            f"/api/orders/{order['id']}/items/9999/status",
            json={"status": "in_preparation"},
            headers=cook_headers,
        )

        assert response.status_code == 404

    def test_multi_role_token(self, client, floor, waiter_headers):
        order = _create(client, waiter_headers).json()
        item_id = order["items"][0]["id"]
        headers = make_auth_headers(WAITER_ID, Roles.WAITER, Roles.COOK)

        response = client.patch(
            f"/api/orders/{order['id']}/items/{item_id}/status",
            json={"status": "in_preparation"},
            headers=headers,
        )

        assert response.status_code == 200

    def test_items_of_paid_order_are_frozen(self, client, floor, waiter_headers):
        order = _create(
            client,
            waiter_headers,
            items=[
                {"product_id": BURGER_ID, "quantity": 2},
                {"product_id": BEER_ID, "quantity": 2},
            ],
        ).json()
        beer_item = order["items"][1]["id"]
        for status in ("in_preparation", "ready", "delivered", "paid"):
            assert _set_status(client, waiter_headers, order["id"], status).status_code == 200

        response = client.patch(
            f"/api/orders/{order['id']}/items/{beer_item}/status",
            json={"status": "cancelled"},
            headers=waiter_headers,
        )

        assert response.status_code == 400
        current = client.get(f"/api/orders/{order['id']}", headers=waiter_headers).json()
        assert current["total_cents"] == 4000
        assert current["items"][1]["status"] == "pending"
        products = client.get("/api/products", headers=waiter_headers).json()
        assert next(p for p in products if p["id"] == BEER_ID)["stock_actual"] == 48
