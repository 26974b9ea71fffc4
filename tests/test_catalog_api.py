"""
Tests for categories, menu items and tables endpoints.
"""

from decimal import Decimal


class TestCategories:
    def test_create_and_list(self, client, category):
        client.post("/categories/", json={"name": "Drinks", "number": "02"})

        response = client.get("/categories/", params={"search": "burg"})
        assert response.status_code == 200
        page = response.json()
        assert page["total"] == 1
        assert page["items"][0]["name"] == "Burgers"
        assert page["items"][0]["sub_categories_count"] == 0

    def test_duplicate_name_is_rejected(self, client, category):
        response = client.post("/categories/", json={"name": "burgers", "number": "09"})
        assert response.status_code == 400
        assert "already exists" in response.json()["detail"]

    def test_status_filter_and_aliases(self, client, category):
        client.put(f"/categories/{category['id']}/active", json={"is_active": False})
        client.post("/categories/", json={"name": "Drinks", "number": "02"})

        active = client.get("/categories/", params={"status": "active"}).json()
        assert [c["name"] for c in active["items"]] == ["Drinks"]
        for alias in ("inactive", "deactivate", "deactivated"):
            inactive = client.get("/categories/", params={"status": alias}).json()
            assert [c["name"] for c in inactive["items"]] == ["Burgers"]

    def test_pagination(self, client):
        for n in range(12):
            client.post("/categories/", json={"name": f"Cat {n:02d}", "number": str(n)})

        page = client.get("/categories/", params={"page": 2, "page_size": 5}).json()
        assert page["total"] == 12
        assert page["total_pages"] == 3
        assert len(page["items"]) == 5

        beyond = client.get("/categories/", params={"page": 9}).json()
        assert beyond["items"] == []
        assert beyond["total"] == 12

    def test_sub_category_requires_category(self, client, category):
        missing = client.post("/categories/sub-categories", json={"name": "Beef", "number": "1", "category_id": 999})
        assert missing.status_code == 400

        created = client.post(
            "/categories/sub-categories", json={"name": "Beef", "number": "1", "category_id": category["id"]}
        )
        assert created.status_code == 201
        assert created.json()["category_name"] == "Burgers"

        listed = client.get("/categories/sub-categories", params={"category_id": category["id"]}).json()
        assert listed["total"] == 1
        assert client.get(f"/categories/{category['id']}").json()["sub_categories_count"] == 1

    def test_null_name_is_ignored(self, client, category):
        r = client.patch(f"/categories/{category['id']}", json={"name": None, "image": "burgers.png"})
        assert r.status_code == 200
        assert r.json()["name"] == "Burgers"
        assert r.json()["image"] == "burgers.png"

        r = client.patch(f"/categories/{category['id']}", json={"image": None})
        assert r.json()["image"] is None

    def test_unknown_category_is_404(self, client):
        assert client.get("/categories/42").status_code == 404
        assert client.patch("/categories/42", json={"name": "X"}).status_code == 404


class TestMenu:
    def test_create_menu_item(self, client, menu_item, category):
        assert menu_item["category_name"] == "Burgers"
        assert len(menu_item["sizes"]) == 2
        assert menu_item["is_active"] is True

    def test_sizes_are_required(self, client, category):
        response = client.post("/menu/", json={"name": "Empty", "category_id": category["id"], "sizes": []})
        assert response.status_code == 422

    def test_sub_category_must_belong_to_category(self, client, category):
        other = client.post("/categories/", json={"name": "Drinks", "number": "02"}).json()
        sub = client.post(
            "/categories/sub-categories", json={"name": "Cola", "number": "1", "category_id": other["id"]}
        ).json()

        response = client.post(
            "/menu/",
            json={
                "name": "Burger",
                "category_id": category["id"],
                "sub_category_id": sub["id"],
                "sizes": [{"size": "Regular", "regular_price": "5"}],
            },
        )
        assert response.status_code == 400

    def test_update_replaces_sizes(self, client, menu_item):
        response = client.patch(
            f"/menu/{menu_item['id']}",
            json={"sizes": [{"size": "One", "regular_price": "9.99"}]},
        )
        assert response.status_code == 200
        sizes = response.json()["sizes"]
        assert len(sizes) == 1
        assert Decimal(sizes[0]["regular_price"]) == Decimal("9.99")

    def test_null_clears_optional_fields_only(self, client, menu_item):
        client.patch(f"/menu/{menu_item['id']}", json={"description": "Double cheese"})
        r = client.patch(
            f"/menu/{menu_item['id']}", json={"description": None, "name": None, "sizes": None}
        )
        assert r.status_code == 200
        assert r.json()["description"] is None
        assert r.json()["name"] == "Cheeseburger"
        assert len(r.json()["sizes"]) == 2

    def test_ingredients_must_exist(self, client, menu_item):
        response = client.patch(
            f"/menu/{menu_item['id']}",
            json={"ingredients": [{"inventory_item_id": 77, "consumption_qty": "0.2"}]},
        )
        assert response.status_code == 400

    def test_filter_and_delete(self, client, menu_item, category):
        listed = client.get("/menu/", params={"category_id": category["id"], "search": "cheese"}).json()
        assert listed["total"] == 1

        client.put(f"/menu/{menu_item['id']}/active", json={"is_active": False})
        assert client.get("/menu/", params={"status": "active"}).json()["total"] == 0

        assert client.delete(f"/menu/{menu_item['id']}").status_code == 204
        assert client.get(f"/menu/{menu_item['id']}").status_code == 404

    def test_ordered_item_cannot_be_deleted(self, client, menu_item):
        client.post("/orders/", json={"items": [{"menu_item_id": menu_item["id"]}]})
        response = client.delete(f"/menu/{menu_item['id']}")
        assert response.status_code == 400


class TestTables:
    def test_crud(self, client, table):
        assert table["table_no"] == "T1"
        assert client.post("/tables/", json={"table_no": "T1", "capacity": 2}).status_code == 400
        assert client.post("/tables/", json={"table_no": "T2", "capacity": 0}).status_code == 422

        updated = client.patch(f"/tables/{table['id']}", json={"capacity": 6}).json()
        assert updated["capacity"] == 6

        toggled = client.put(f"/tables/{table['id']}/active", json={"is_active": False}).json()
        assert toggled["is_active"] is False
        assert client.get("/tables/", params={"status": "inactive"}).json()["total"] == 1
