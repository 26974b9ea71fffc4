"""
Tests for inventory, purchases, supplier bills and expenses.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

TODAY = datetime.now(timezone.utc).date()


@pytest.fixture
def purchase(client, supplier):
    response = client.post(
        "/purchases/",
        json={
            "supplier_id": supplier["id"],
            "payment_type": "cash",
            "purchase_date": TODAY.isoformat(),
            "vat": "5.00",
            "discount": "2.00",
            "paid_amount": "20.00",
            "items": [
                {"name": "Tomato", "quantity": "2", "unit": "kg", "unit_price": "3.50"},
                {"name": "Milk", "quantity": "4", "unit": "ML", "unit_price": "10.00"},
            ],
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def expense_type(client):
    response = client.post("/expense-types/", json={"name": "Utilities"})
    assert response.status_code == 201
    return response.json()


class TestInventory:
    def test_stock_status(self, client):
        client.post("/inventory/", json={"name": "Flour", "quantity": "50", "low_threshold": "10"})
        client.post("/inventory/", json={"name": "Salt", "quantity": "2", "low_threshold": "5"})
        client.post("/inventory/", json={"name": "Sugar", "quantity": "0", "low_threshold": "5"})

        items = {i["name"]: i["stock_status"] for i in client.get("/inventory/").json()["items"]}
        assert items == {"Flour": "sufficient", "Salt": "low", "Sugar": "out-of-stock"}

        low = client.get("/inventory/stock", params={"stock_status": "low"}).json()
        assert [i["name"] for i in low["items"]] == ["Salt"]
        out = client.get("/inventory/stock", params={"stock_status": "out-of-stock"}).json()
        assert [i["name"] for i in out["items"]] == ["Sugar"]

    def test_quantity_cannot_be_negative(self, client):
        assert client.post("/inventory/", json={"name": "Oil", "quantity": "-1"}).status_code == 422

    def test_update_and_toggle(self, client):
        item = client.post("/inventory/", json={"name": "Oil", "quantity": "3", "low_threshold": "5"}).json()
        assert item["stock_status"] == "low"

        updated = client.patch(f"/inventory/{item['id']}", json={"quantity": "30"}).json()
        assert updated["stock_status"] == "sufficient"

        toggled = client.put(f"/inventory/{item['id']}/active", json={"is_active": False}).json()
        assert toggled["is_active"] is False
        assert client.get("/inventory/99").status_code == 404

    def test_null_fields_are_ignored(self, client):
        item = client.post("/inventory/", json={"name": "Oil", "quantity": "3"}).json()
        r = client.patch(f"/inventory/{item['id']}", json={"name": None, "quantity": None, "unit": "l"})
        assert r.status_code == 200
        assert r.json()["name"] == "Oil"
        assert Decimal(r.json()["quantity"]) == Decimal("3")
        assert r.json()["unit"] == "l"

    def test_spend_stats(self, client, purchase, supplier):
        old = TODAY.replace(day=1) - timedelta(days=1)
        client.post(
            "/purchases/",
            json={
                "supplier_id": supplier["id"],
                "payment_type": "card",
                "purchase_date": old.isoformat(),
                "items": [{"name": "Rice", "quantity": "1", "unit_price": "100"}],
            },
        )

        stats = client.get("/inventory/stats").json()
        assert Decimal(stats["today_spend"]) == Decimal("50.00")
        assert Decimal(stats["monthly_spend"]) == Decimal("50.00")


class TestPurchases:
    def test_totals_and_invoice(self, purchase):
        assert purchase["invoice_no"] == f"INV-{purchase['id']:05d}"
        assert Decimal(purchase["total_price"]) == Decimal("47.00")
        assert Decimal(purchase["total_amount"]) == Decimal("50.00")
        assert Decimal(purchase["due_amount"]) == Decimal("30.00")
        assert purchase["supplier_name"] == "Fresh Farm"
        assert purchase["items"][1]["unit"] == "ML"

    def test_explicit_invoice_must_be_unique(self, client, supplier):
        body = {
            "invoice_no": "A-1",
            "supplier_id": supplier["id"],
            "payment_type": "cash",
            "purchase_date": TODAY.isoformat(),
            "items": [{"name": "Rice", "quantity": "1", "unit_price": "1"}],
        }
        assert client.post("/purchases/", json=body).status_code == 201
        assert client.post("/purchases/", json=body).status_code == 400

    def test_validation(self, client, supplier):
        body = {
            "supplier_id": supplier["id"],
            "payment_type": "cash",
            "purchase_date": TODAY.isoformat(),
            "items": [{"name": "Rice", "quantity": "0", "unit_price": "1"}],
        }
        assert client.post("/purchases/", json=body).status_code == 422
        body["items"] = []
        assert client.post("/purchases/", json=body).status_code == 422
        body["items"] = [{"name": "Rice", "quantity": "1", "unit_price": "1"}]
        body["supplier_id"] = 999
        assert client.post("/purchases/", json=body).status_code == 400

    def test_search_ingredient_filter_and_names(self, client, purchase):
        assert client.get("/purchases/", params={"search": "fresh"}).json()["total"] == 1
        assert client.get("/purchases/", params={"search": "toma"}).json()["total"] == 1
        assert client.get("/purchases/", params={"ingredient": "milk"}).json()["total"] == 1
        assert client.get("/purchases/", params={"ingredient": "mil"}).json()["total"] == 0
        assert client.get("/purchases/ingredients").json() == ["Milk", "Tomato"]

    def test_update_replaces_items_and_delete(self, client, purchase):
        r = client.patch(
            f"/purchases/{purchase['id']}",
            json={"items": [{"name": "Onion", "quantity": "10", "unit_price": "2"}]},
        )
        assert r.status_code == 200
        assert [i["name"] for i in r.json()["items"]] == ["Onion"]
        assert Decimal(r.json()["total_amount"]) == Decimal("23.00")

        assert client.delete(f"/purchases/{purchase['id']}").status_code == 204
        assert client.get(f"/purchases/{purchase['id']}").status_code == 404


class TestSuppliers:
    def test_search(self, client, supplier):
        assert client.get("/suppliers/", params={"search": "freshfarm"}).json()["total"] == 1
        assert client.get("/suppliers/", params={"search": "0100"}).json()["total"] == 1
        assert client.post("/suppliers/", json={"name": "X", "number": "1", "email": "bad"}).status_code == 422

    def test_stats_and_due_bills(self, client, purchase):
        stats = client.get("/suppliers/stats").json()
        assert stats["total_suppliers"] == 1
        assert stats["total_bills"] == 1
        assert Decimal(stats["total_amount"]) == Decimal("50.00")
        assert Decimal(stats["total_due"]) == Decimal("30.00")

        due = client.get("/suppliers/bills/due").json()
        assert due["total"] == 1
        bill = due["items"][0]
        assert bill["bill_id"] == purchase["invoice_no"]
        assert bill["supplier"] == "Fresh Farm"

    def test_payment(self, client, purchase):
        url = f"/suppliers/bills/{purchase['id']}/payments"
        assert client.post(url, json={"amount": "0", "payment_method": "cash"}).status_code == 422
        assert client.post(url, json={"amount": "30.01", "payment_method": "cash"}).status_code == 400

        r = client.post(url, json={"amount": "30", "payment_method": "bank"})
        assert r.status_code == 200
        assert Decimal(r.json()["due"]) == Decimal("0.00")
        assert r.json()["payment_method"] == "bank"
        assert client.get("/suppliers/bills/due").json()["total"] == 0

        assert client.post("/suppliers/bills/999/payments", json={"amount": "1", "payment_method": "x"}).status_code == 404

    def test_supplier_bills(self, client, purchase, supplier):
        bills = client.get(f"/suppliers/{supplier['id']}/bills").json()
        assert [b["purchase_id"] for b in bills["items"]] == [purchase["id"]]
        assert client.get("/suppliers/999/bills").status_code == 404


class TestExpenses:
    def test_type_lifecycle(self, client, expense_type):
        assert client.post("/expense-types/", json={"name": "utilities"}).status_code == 400
        client.put(f"/expense-types/{expense_type['id']}/active", json={"is_active": False})
        assert client.get("/expense-types/", params={"status": "deactivated"}).json()["total"] == 1

        r = client.post(
            "/expenses/",
            json={
                "expense_type_id": expense_type["id"],
                "name": "Electricity",
                "quantity": "1",
                "unit_price": "10",
                "date": TODAY.isoformat(),
            },
        )
        assert r.status_code == 400

    def test_create_and_filter(self, client, expense_type):
        r = client.post(
            "/expenses/",
            json={
                "expense_type_id": expense_type["id"],
                "name": "Electricity",
                "quantity": "2",
                "unit_price": "50",
                "total_discount": "5",
                "paid_amount": "60",
                "date": TODAY.isoformat(),
            },
        )
        assert r.status_code == 201
        expense = r.json()
        assert expense["expense_no"] == f"EXP-{expense['id']:05d}"
        assert Decimal(expense["total_price"]) == Decimal("95.00")
        assert expense["expense_type"] == "Utilities"

        assert client.get("/expenses/", params={"expense_type": "UTILITIES"}).json()["total"] == 1
        assert client.get("/expenses/", params={"expense_type": "Rent"}).json()["total"] == 0
        assert client.get("/expenses/", params={"search": "elec"}).json()["total"] == 1
        assert client.get("/expenses/types").json() == ["Utilities"]

        updated = client.patch(f"/expenses/{expense['id']}", json={"unit_price": "60"}).json()
        assert Decimal(updated["total_price"]) == Decimal("115.00")

        assert client.delete(f"/expenses/{expense['id']}").status_code == 204
        assert client.get(f"/expenses/{expense['id']}").status_code == 404
