"""
Tests for orders and the kitchen board.
"""

from decimal import Decimal

import pytest


@pytest.fixture
def order(client, menu_item, table):
    response = client.post(
        "/orders/",
        json={
            "table_id": table["id"],
            "tax": "1.00",
            "discount": "0.50",
            "items": [{"menu_item_id": menu_item["id"], "quantity": 2}, {"menu_item_id": menu_item["id"]}],
        },
    )
    assert response.status_code == 201
    return response.json()


class TestCreateOrder:
    def test_snapshots_offer_price(self, order):
        assert order["status"] == "Receive"
        assert order["table_no"] == "T1"
        assert [i["status"] for i in order["items"]] == ["Receive", "Receive"]
        assert Decimal(order["items"][0]["price"]) == Decimal("8.50")
        assert order["items"][0]["name"] == "Cheeseburger"
        assert order["count_items"] == 3
        assert Decimal(order["subtotal"]) == Decimal("25.50")
        assert Decimal(order["total_amount"]) == Decimal("26.00")
        assert order["closed_at"] is None

    def test_snapshot_is_kept_after_menu_change(self, client, order, menu_item):
        client.patch(f"/menu/{menu_item['id']}", json={"name": "Renamed"})
        fetched = client.get(f"/orders/{order['id']}").json()
        assert fetched["items"][0]["name"] == "Cheeseburger"

    def test_requires_items(self, client):
        assert client.post("/orders/", json={"items": []}).status_code == 422

    def test_quantity_must_be_positive(self, client, menu_item):
        response = client.post("/orders/", json={"items": [{"menu_item_id": menu_item["id"], "quantity": 0}]})
        assert response.status_code == 422

    def test_unknown_menu_item(self, client):
        response = client.post("/orders/", json={"items": [{"menu_item_id": 404}]})
        assert response.status_code == 400

    def test_inactive_menu_item(self, client, menu_item):
        client.put(f"/menu/{menu_item['id']}/active", json={"is_active": False})
        response = client.post("/orders/", json={"items": [{"menu_item_id": menu_item["id"]}]})
        assert response.status_code == 400

    def test_unknown_table(self, client, menu_item):
        response = client.post("/orders/", json={"table_id": 9, "items": [{"menu_item_id": menu_item["id"]}]})
        assert response.status_code == 400


class TestOrderStatus:
    def test_item_status_drives_order_status(self, client, order):
        first, second = (i["id"] for i in order["items"])

        r = client.patch(f"/orders/{order['id']}/items/{first}", json={"status": "Preparing"})
        assert r.json()["status"] == "Preparing"

        client.patch(f"/orders/{order['id']}/items/{first}", json={"status": "Ready"})
        r = client.patch(f"/orders/{order['id']}/items/{second}", json={"status": "Ready"})
        assert r.json()["status"] == "Ready"

        client.patch(f"/orders/{order['id']}/items/{first}", json={"status": "Served"})
        r = client.patch(f"/orders/{order['id']}/items/{second}", json={"status": "Served"})
        assert r.json()["status"] == "Served"
        assert r.json()["closed_at"] is not None

        r = client.patch(f"/orders/{order['id']}/items/{second}", json={"status": "Ready"})
        assert r.json()["closed_at"] is None

    def test_order_status_applies_to_all_items(self, client, order):
        r = client.patch(f"/orders/{order['id']}", json={"status": "Served"})
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "Served"
        assert {i["status"] for i in body["items"]} == {"Served"}

    def test_unknown_item(self, client, order):
        r = client.patch(f"/orders/{order['id']}/items/999", json={"status": "Ready"})
        assert r.status_code == 400

    def test_invalid_status_value(self, client, order):
        item_id = order["items"][0]["id"]
        r = client.patch(f"/orders/{order['id']}/items/{item_id}", json={"status": "Cooking"})
        assert r.status_code == 422


class TestUpdateOrder:
    def test_null_fields_are_ignored(self, client, order):
        r = client.patch(f"/orders/{order['id']}", json={"order_type": None, "status": None, "tax": None})
        assert r.status_code == 200
        assert r.json()["order_type"] == order["order_type"]
        assert r.json()["status"] == "Receive"
        assert Decimal(r.json()["tax"]) == Decimal("1.00")

    def test_table_can_be_cleared(self, client, order):
        r = client.patch(f"/orders/{order['id']}", json={"table_id": None})
        assert r.status_code == 200
        assert r.json()["table_id"] is None

    def test_discount_above_total_on_create(self, client, menu_item):
        response = client.post(
            "/orders/", json={"discount": "100", "items": [{"menu_item_id": menu_item["id"]}]}
        )
        assert response.status_code == 400
        assert client.get("/orders/").json()["total"] == 0

    def test_discount_above_total_on_update(self, client, order):
        r = client.patch(f"/orders/{order['id']}", json={"discount": "26.51"})
        assert r.status_code == 400
        assert Decimal(client.get(f"/orders/{order['id']}").json()["discount"]) == Decimal("0.50")

        r = client.patch(f"/orders/{order['id']}", json={"discount": "26.50"})
        assert Decimal(r.json()["total_amount"]) == Decimal("0.00")


class TestOrderQueries:
    def test_search_and_filter(self, client, order, menu_item):
        client.post("/orders/", json={"order_type": "takeaway", "items": [{"menu_item_id": menu_item["id"]}]})

        assert client.get("/orders/").json()["total"] == 2
        assert client.get("/orders/", params={"search": "t1"}).json()["total"] == 1
        assert client.get("/orders/", params={"search": "cheese"}).json()["total"] == 2

        client.patch(f"/orders/{order['id']}", json={"status": "Preparing"})
        preparing = client.get("/orders/", params={"status": "Preparing"}).json()
        assert [o["id"] for o in preparing["items"]] == [order["id"]]

    def test_newest_first(self, client, order, menu_item):
        second = client.post("/orders/", json={"items": [{"menu_item_id": menu_item["id"]}]}).json()
        ids = [o["id"] for o in client.get("/orders/").json()["items"]]
        assert ids == [second["id"], order["id"]]

    def test_stats(self, client, order, menu_item):
        other = client.post("/orders/", json={"items": [{"menu_item_id": menu_item["id"]}]}).json()
        third = client.post("/orders/", json={"items": [{"menu_item_id": menu_item["id"]}]}).json()
        client.patch(f"/orders/{order['id']}", json={"status": "Preparing"})
        client.patch(f"/orders/{other['id']}", json={"status": "Ready"})
        client.patch(f"/orders/{third['id']}", json={"status": "Served"})

        stats = client.get("/orders/stats").json()
        assert stats == {"total": 3, "in_progress": 1, "delivered": 2}

    def test_delete(self, client, order):
        assert client.delete(f"/orders/{order['id']}").status_code == 204
        assert client.get(f"/orders/{order['id']}").status_code == 404
        assert client.delete(f"/orders/{order['id']}").status_code == 404


class TestKitchen:
    def test_board_columns(self, client, order):
        board = client.get("/kitchen/board").json()
        assert set(board) == {"receive", "preparing", "ready", "served"}
        assert [o["id"] for o in board["receive"]] == [order["id"]]
        assert board["receive"][0]["progress"] == 0

    def test_advance_item(self, client, order):
        item_id = order["items"][0]["id"]
        url = f"/kitchen/orders/{order['id']}/items/{item_id}/advance"

        r = client.post(url)
        assert r.status_code == 200
        assert r.json()["status"] == "Preparing"
        assert r.json()["progress"] == 17

        client.post(url)
        client.post(url)
        served = client.get(f"/orders/{order['id']}").json()
        assert served["items"][0]["status"] == "Served"

        r = client.post(url)
        assert r.status_code == 400

        board = client.get("/kitchen/board").json()
        assert board["receive"][0]["progress"] == 50

    def test_advance_unknown_order(self, client):
        assert client.post("/kitchen/orders/5/items/1/advance").status_code == 404

    def test_served_column_limited_to_current_day(self, client, order, menu_item):
        client.patch(f"/orders/{order['id']}", json={"status": "Served"})
        board = client.get("/kitchen/board").json()
        assert [o["id"] for o in board["served"]] == [order["id"]]

        assert client.post("/day/open").status_code == 200
        fresh = client.post("/orders/", json={"items": [{"menu_item_id": menu_item["id"]}]}).json()
        client.patch(f"/orders/{fresh['id']}", json={"status": "Served"})
        waiting = client.post("/orders/", json={"items": [{"menu_item_id": menu_item["id"]}]}).json()

        board = client.get("/kitchen/board").json()
        assert [o["id"] for o in board["served"]] == [fresh["id"]]
        assert [o["id"] for o in board["receive"]] == [waiting["id"]]
