"""
Tests for order status derivation and kitchen progress.
"""

import pytest

from restaurant_admin.models.order import OrderStatusEnum as S
from restaurant_admin.services.kitchen import derive_order_status, next_status, order_progress


class TestDeriveOrderStatus:
    def test_all_served(self):
        assert derive_order_status([S.served, S.served]) == S.served

    def test_all_ready(self):
        assert derive_order_status([S.ready, S.ready]) == S.ready

    def test_any_preparing(self):
        assert derive_order_status([S.receive, S.preparing, S.ready]) == S.preparing

    def test_mixed_ready_and_served_falls_back_to_receive(self):
        assert derive_order_status([S.ready, S.served]) == S.receive

    def test_all_received(self):
        assert derive_order_status([S.receive]) == S.receive

    def test_empty_list_is_served(self):
        assert derive_order_status([]) == S.served

    def test_accepts_generator(self):
        assert derive_order_status(s for s in [S.ready]) == S.ready


class TestNextStatus:
    @pytest.mark.parametrize(
        "current, expected",
        [(S.receive, S.preparing), (S.preparing, S.ready), (S.ready, S.served), (S.served, None)],
    )
    def test_flow(self, current, expected):
        assert next_status(current) == expected


class TestOrderProgress:
    def test_empty_order(self):
        assert order_progress([]) == 0

    def test_single_item_each_status(self):
        assert order_progress([S.receive]) == 0
        assert order_progress([S.preparing]) == 33
        assert order_progress([S.ready]) == 67
        assert order_progress([S.served]) == 100

    def test_mean_rounds_half_up(self):
        # (0 + 33.33) / 2 = 16.665
        assert order_progress([S.receive, S.preparing]) == 17

    def test_mean_of_mixed(self):
        # (66.66 + 100) / 2 = 83.33
        assert order_progress([S.ready, S.served]) == 83
