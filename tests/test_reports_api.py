"""
Tests for reports and the dashboard.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from restaurant_admin.crud.dashboard import bucket_start, bucket_starts
from restaurant_admin.schemas.dashboard import OverviewPeriod

TODAY = datetime.now(timezone.utc).date()


@pytest.fixture
def served_order(client, menu_item):
    order = client.post(
        "/orders/",
        json={"tax": "2.00", "discount": "1.00", "items": [{"menu_item_id": menu_item["id"], "quantity": 2}]},
    ).json()
    client.patch(f"/orders/{order['id']}", json={"status": "Served"})
    return order


class TestSalesReport:
    def test_only_ready_and_served(self, client, served_order, menu_item):
        client.post("/orders/", json={"items": [{"menu_item_id": menu_item["id"]}]})

        report = client.get("/reports/sales").json()
        assert report["total"] == 1
        row = report["items"][0]
        # subtotal 17.00, cost = 17 * 0.6
        assert Decimal(row["amount"]) == Decimal("18.00")
        assert Decimal(row["cost"]) == Decimal("10.20")
        assert Decimal(row["profit"]) == Decimal("4.80")
        assert Decimal(report["totals"]["total_sale"]) == Decimal("18.00")
        assert Decimal(report["totals"]["total_profit"]) == Decimal("4.80")

    def test_date_bounds_are_inclusive(self, client, served_order):
        params = {"date_from": TODAY.isoformat(), "date_to": TODAY.isoformat()}
        assert client.get("/reports/sales", params=params).json()["total"] == 1

        yesterday = (TODAY - timedelta(days=1)).isoformat()
        assert client.get("/reports/sales", params={"date_to": yesterday}).json()["total"] == 0

    def test_inverted_range(self, client):
        params = {"date_from": TODAY.isoformat(), "date_to": (TODAY - timedelta(days=1)).isoformat()}
        assert client.get("/reports/sales", params=params).status_code == 400

    def test_totals_cover_all_pages(self, client, menu_item):
        for _ in range(3):
            order = client.post("/orders/", json={"items": [{"menu_item_id": menu_item["id"]}]}).json()
            client.patch(f"/orders/{order['id']}", json={"status": "Ready"})

        report = client.get("/reports/sales", params={"page_size": 2}).json()
        assert len(report["items"]) == 2
        assert report["total_pages"] == 2
        assert Decimal(report["totals"]["total_sale"]) == Decimal("25.50")


class TestTopSellingReports:
    @pytest.fixture
    def drink_order(self, client, served_order):
        drinks = client.post("/categories/", json={"name": "Drinks", "number": "02"}).json()
        cola = client.post(
            "/menu/",
            json={"name": "Cola", "category_id": drinks["id"], "sizes": [{"size": "Can", "regular_price": "3.00"}]},
        ).json()
        order = client.post("/orders/", json={"items": [{"menu_item_id": cola["id"]}]}).json()
        client.patch(f"/orders/{order['id']}", json={"status": "Ready"})
        # не продано: заказ ещё на кухне
        client.post("/orders/", json={"items": [{"menu_item_id": cola["id"], "quantity": 5}]})
        return cola

    def test_top_selling_items(self, client, drink_order, menu_item):
        report = client.get("/reports/top-selling").json()
        assert report["total"] == 2
        first, second = report["items"]
        assert (first["menu_item_id"], first["name"], first["quantity"]) == (menu_item["id"], "Cheeseburger", 2)
        assert Decimal(first["revenue"]) == Decimal("17.00")
        assert (second["name"], second["quantity"]) == ("Cola", 1)
        assert report["totals"]["total_quantity"] == 3
        assert Decimal(report["totals"]["total_revenue"]) == Decimal("20.00")

    def test_top_selling_search_and_dates(self, client, drink_order):
        report = client.get("/reports/top-selling", params={"search": "COLA"}).json()
        assert [i["name"] for i in report["items"]] == ["Cola"]

        yesterday = (TODAY - timedelta(days=1)).isoformat()
        assert client.get("/reports/top-selling", params={"date_to": yesterday}).json()["total"] == 0

    def test_sales_by_category(self, client, drink_order):
        report = client.get("/reports/sales-by-category").json()
        rows = {r["category"]: r for r in report["items"]}
        assert set(rows) == {"Burgers", "Drinks"}
        assert Decimal(rows["Burgers"]["revenue"]) == Decimal("17.00")
        assert Decimal(rows["Burgers"]["percentage"]) == Decimal("85.00")
        assert Decimal(rows["Drinks"]["percentage"]) == Decimal("15.00")
        assert rows["Drinks"]["orders"] == 1
        assert report["items"][0]["category"] == "Burgers"
        assert report["totals"]["total_orders"] == 2
        assert Decimal(report["totals"]["total_revenue"]) == Decimal("20.00")

    def test_sales_by_category_empty(self, client):
        report = client.get("/reports/sales-by-category").json()
        assert report["total"] == 0
        assert Decimal(report["totals"]["total_revenue"]) == Decimal("0")


class TestPurchaseExpenseSupplierReports:
    @pytest.fixture
    def data(self, client, supplier):
        client.post(
            "/purchases/",
            json={
                "supplier_id": supplier["id"],
                "payment_type": "cash",
                "purchase_date": TODAY.isoformat(),
                "paid_amount": "5",
                "items": [{"name": "Beef", "quantity": "2", "unit_price": "10"}],
            },
        )
        etype = client.post("/expense-types/", json={"name": "Rent"}).json()
        client.post(
            "/expenses/",
            json={
                "expense_type_id": etype["id"],
                "name": "Office",
                "quantity": "1",
                "unit_price": "100",
                "total_discount": "10",
                "paid_amount": "40",
                "date": TODAY.isoformat(),
            },
        )

    def test_purchase_report(self, client, data):
        report = client.get("/reports/purchases", params={"search": "beef"}).json()
        assert report["total"] == 1
        assert report["items"][0]["item_name"] == "Beef"
        assert Decimal(report["totals"]["total_amount"]) == Decimal("20.00")
        assert Decimal(report["totals"]["total_due"]) == Decimal("15.00")

    def test_expense_report_ignores_discount_in_amount(self, client, data):
        report = client.get("/reports/expenses").json()
        assert report["items"][0]["expense_type"] == "Rent"
        assert Decimal(report["totals"]["total_amount"]) == Decimal("100.00")
        assert Decimal(report["totals"]["total_due"]) == Decimal("60.00")

    def test_supplier_report_counts_all_suppliers(self, client, data):
        client.post("/suppliers/", json={"name": "Idle Co", "number": "2", "email": "idle@co.test"})
        report = client.get("/reports/suppliers", params={"search": "fresh"}).json()
        assert report["total"] == 1
        assert report["totals"]["total_suppliers"] == 2
        assert Decimal(report["totals"]["total_paid"]) == Decimal("5.00")

        past = (TODAY - timedelta(days=30)).isoformat()
        assert client.get("/reports/suppliers", params={"date_to": past}).json()["total"] == 0


class TestDashboard:
    def test_summary(self, client, served_order, menu_item):
        client.post("/orders/", json={"items": [{"menu_item_id": menu_item["id"], "quantity": 3}]})
        client.post("/users/", json={"username": "chef", "name": "Chef", "password": "secret12"})

        summary = client.get("/dashboard/summary").json()
        assert summary["total_orders"] == 2
        assert Decimal(summary["total_revenue"]) == Decimal("18.00")
        assert summary["total_staff"] == 1
        assert summary["top_items"] == [
            {"menu_item_id": menu_item["id"], "menu_item_name": "Cheeseburger", "total_sold": 5}
        ]
        assert len(summary["recent_orders"]) == 2

    def test_overview_default_window(self, client, served_order):
        overview = client.get("/dashboard/overview").json()
        assert overview["period"] == "day"
        assert len(overview["buckets"]) == 7
        last = overview["buckets"][-1]
        assert last["start"] == TODAY.isoformat()
        assert last["orders"] == 1
        assert Decimal(last["revenue"]) == Decimal("18.00")

        assert len(client.get("/dashboard/overview", params={"period": "week"}).json()["buckets"]) == 8
        assert len(client.get("/dashboard/overview", params={"period": "month"}).json()["buckets"]) == 6


class TestBuckets:
    def test_bucket_start(self):
        day = datetime(2024, 3, 14).date()  # четверг
        assert bucket_start(day, OverviewPeriod.week).isoformat() == "2024-03-11"
        assert bucket_start(day, OverviewPeriod.month).isoformat() == "2024-03-01"

    def test_months_cross_year(self):
        starts = bucket_starts(datetime(2024, 2, 10).date(), OverviewPeriod.month, 4)
        assert [s.isoformat() for s in starts] == ["2023-11-01", "2023-12-01", "2024-01-01", "2024-02-01"]
