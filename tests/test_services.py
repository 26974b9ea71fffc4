"""
Tests for password hashing and the permission catalogue.
"""

from decimal import Decimal

from restaurant_admin.schemas.inventory import StockStatusEnum, stock_status
from restaurant_admin.services.passwords import hash_password, verify_password
from restaurant_admin.services.permissions import all_codes, grouped_permissions


class TestPasswords:
    def test_hash_verifies(self):
        stored = hash_password("secret12")
        assert stored.startswith("pbkdf2:sha256:")
        assert verify_password("secret12", stored)
        assert not verify_password("secret13", stored)

    def test_salt_differs_between_hashes(self):
        assert hash_password("secret12") != hash_password("secret12")

    def test_malformed_hash_does_not_verify(self):
        assert not verify_password("secret12", "plain-text")


class TestPermissions:
    def test_catalogue_contains_parents_and_children(self):
        codes = all_codes()
        assert {"menu.manage", "menu.create", "role.manage"} <= codes

    def test_grouped_marks_enabled(self):
        groups = grouped_permissions({"menu.create"})
        menu = next(node for node in groups["Menu"] if node["code"] == "menu.manage")
        assert menu["is_enabled"] is False
        child = next(c for c in menu["children"] if c["code"] == "menu.create")
        assert child["is_enabled"] is True
        assert set(groups) == {"Menu", "Orders", "Stock", "Finance", "Administration"}


class TestStockStatus:
    def test_levels(self):
        assert stock_status(Decimal("0"), Decimal("5")) == StockStatusEnum.out_of_stock
        assert stock_status(Decimal("-1"), Decimal("0")) == StockStatusEnum.out_of_stock
        assert stock_status(Decimal("5"), Decimal("5")) == StockStatusEnum.low
        assert stock_status(Decimal("5.001"), Decimal("5")) == StockStatusEnum.sufficient
