"""
Tests for roles, users, the business day and the health check.
"""

import pytest


@pytest.fixture
def user(client):
    response = client.post(
        "/users/",
        json={"username": "manager", "name": "Alex Doe", "email": "alex@example.com", "password": "secret12"},
    )
    assert response.status_code == 201
    return response.json()


class TestRoles:
    def test_create_and_list(self, client):
        r = client.post("/roles/", json={"name": "Cashier", "permissions": ["order.create"]})
        assert r.status_code == 201
        assert r.json()["permissions"] == ["order.create"]

        assert client.post("/roles/", json={"name": "cashier"}).status_code == 400
        assert client.get("/roles/", params={"search": "cash"}).json()["total"] == 1

    def test_unknown_permission_code(self, client):
        assert client.post("/roles/", json={"name": "Chef", "permissions": ["nuke.all"]}).status_code == 400

    def test_replace_permissions(self, client):
        role = client.post("/roles/", json={"name": "Chef", "permissions": ["kitchen.view"]}).json()

        r = client.put(f"/roles/{role['id']}/permissions", json={"permissions": ["kitchen.progress", "menu.edit"]})
        assert r.status_code == 200
        groups = r.json()["groups"]
        kitchen = next(n for n in groups["Orders"] if n["code"] == "kitchen.view")
        assert kitchen["is_enabled"] is False
        assert kitchen["children"][0]["is_enabled"] is True

        fetched = client.get(f"/roles/{role['id']}/permissions").json()
        menu = next(n for n in fetched["groups"]["Menu"] if n["code"] == "menu.manage")
        assert [c["code"] for c in menu["children"] if c["is_enabled"]] == ["menu.edit"]

        assert client.put(f"/roles/{role['id']}/permissions", json={"permissions": ["bad"]}).status_code == 400
        assert client.get("/roles/99/permissions").status_code == 404


class TestUsers:
    def test_profile(self, client, user):
        assert "password_hash" not in user
        role = client.post("/roles/", json={"name": "Manager"}).json()

        r = client.patch(f"/users/{user['id']}", json={"phone": "555-0101", "role_id": role["id"]})
        assert r.status_code == 200
        assert r.json()["role_name"] == "Manager"
        assert client.get(f"/users/{user['id']}").json()["phone"] == "555-0101"

        assert client.patch(f"/users/{user['id']}", json={"role_id": 99}).status_code == 400
        assert client.get("/users/", params={"search": "alex"}).json()["total"] == 1

    def test_null_clears_contact_but_keeps_name(self, client, user):
        client.patch(f"/users/{user['id']}", json={"phone": "555-0101"})
        r = client.patch(f"/users/{user['id']}", json={"phone": None, "name": None})
        assert r.status_code == 200
        assert r.json()["phone"] is None
        assert r.json()["name"] == user["name"]

    def test_username_taken(self, client, user):
        r = client.post("/users/", json={"username": "manager", "name": "X", "password": "secret12"})
        assert r.status_code == 400

    def test_password_length(self, client):
        short = client.post("/users/", json={"username": "joe", "name": "Joe", "password": "short"})
        long = client.post("/users/", json={"username": "joe", "name": "Joe", "password": "much-too-long"})
        assert short.status_code == 422
        assert long.status_code == 422

    def test_change_password(self, client, user):
        url = f"/users/{user['id']}/password"
        mismatch = {"current_password": "secret12", "new_password": "newpass12", "confirm_password": "newpass13"}
        same = {"current_password": "secret12", "new_password": "secret12", "confirm_password": "secret12"}
        wrong = {"current_password": "wrong123", "new_password": "newpass12", "confirm_password": "newpass12"}
        good = {"current_password": "secret12", "new_password": "newpass12", "confirm_password": "newpass12"}

        assert client.post(url, json=mismatch).status_code == 400
        assert client.post(url, json=same).status_code == 400
        assert client.post(url, json=wrong).status_code == 400
        assert client.post(url, json=good).status_code == 204

        # старый пароль больше не подходит
        again = {"current_password": "secret12", "new_password": "other123", "confirm_password": "other123"}
        assert client.post(url, json=again).status_code == 400
        assert client.post("/users/99/password", json=good).status_code == 404


class TestDay:
    def test_closed_before_first_open(self, client):
        status = client.get("/day/").json()
        assert status["is_open"] is False
        assert status["opened_at"] is None

    def test_open_close_cycle(self, client):
        assert client.post("/day/close").status_code == 400

        opened = client.post("/day/open")
        assert opened.status_code == 200
        assert opened.json()["is_open"] is True
        assert client.post("/day/open").status_code == 400

        closed = client.post("/day/close").json()
        assert closed["is_open"] is False
        assert closed["duration_hours"] == 0.0
        assert client.post("/day/close").status_code == 400

        assert client.post("/day/open").status_code == 200


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert "timestamp" in body
