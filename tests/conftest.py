import os

os.environ.setdefault("RESTAURANT_ADMIN_DATABASE_URL", "sqlite+aiosqlite://")
os.environ["RESTAURANT_ADMIN_AUTO_CREATE_SCHEMA"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from restaurant_admin.db.session import build_engine, create_schema, get_async_session
from restaurant_admin.main import app


@pytest.fixture
def client():
    """Клиент с отдельной in-memory базой на каждый тест."""
    engine = build_engine("sqlite+aiosqlite://")
    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    with TestClient(app) as c:
        c.portal.call(create_schema, engine)
        yield c
        c.portal.call(engine.dispose)
    app.dependency_overrides.clear()


@pytest.fixture
def category(client):
    response = client.post("/categories/", json={"name": "Burgers", "number": "01"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def menu_item(client, category):
    response = client.post(
        "/menu/",
        json={
            "name": "Cheeseburger",
            "category_id": category["id"],
            "sizes": [
                {"size": "Regular", "regular_price": "10.00", "offer_price": "8.50"},
                {"size": "Large", "regular_price": "14.00"},
            ],
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def table(client):
    response = client.post("/tables/", json={"table_no": "T1", "capacity": 4})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def supplier(client):
    response = client.post(
        "/suppliers/",
        json={"name": "Fresh Farm", "number": "+1 555 0100", "email": "orders@freshfarm.test"},
    )
    assert response.status_code == 201
    return response.json()
