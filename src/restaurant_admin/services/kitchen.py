"""
Логика кухонного экрана: статус заказа выводится из статусов его позиций.

Поток статусов позиции: Receive -> Preparing -> Ready -> Served.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from restaurant_admin.models.order import OrderStatusEnum

STATUS_FLOW = {
    OrderStatusEnum.receive: OrderStatusEnum.preparing,
    OrderStatusEnum.preparing: OrderStatusEnum.ready,
    OrderStatusEnum.ready: OrderStatusEnum.served,
    OrderStatusEnum.served: None,
}

# вес статуса в прогрессе заказа, %
STATUS_WEIGHTS = {
    OrderStatusEnum.receive: Decimal("0"),
    OrderStatusEnum.preparing: Decimal("33.33"),
    OrderStatusEnum.ready: Decimal("66.66"),
    OrderStatusEnum.served: Decimal("100"),
}

BOARD_COLUMNS = {
    "receive": OrderStatusEnum.receive,
    "preparing": OrderStatusEnum.preparing,
    "ready": OrderStatusEnum.ready,
    "served": OrderStatusEnum.served,
}


def derive_order_status(statuses: Iterable[OrderStatusEnum]) -> OrderStatusEnum:
    """
    Served: все позиции поданы; Ready: все готовы;
    Preparing: хоть одна готовится; иначе Receive.
    Пустой список даёт Served, all() по пустому списку истинно.
    """
    statuses = list(statuses)
    if all(s == OrderStatusEnum.served for s in statuses):
        return OrderStatusEnum.served
    if all(s == OrderStatusEnum.ready for s in statuses):
        return OrderStatusEnum.ready
    if any(s == OrderStatusEnum.preparing for s in statuses):
        return OrderStatusEnum.preparing
    return OrderStatusEnum.receive


def next_status(status: OrderStatusEnum) -> Optional[OrderStatusEnum]:
    return STATUS_FLOW[status]


def order_progress(statuses: Iterable[OrderStatusEnum]) -> int:
    """Средний вес статусов позиций, округлённый до целого, половина вверх."""
    statuses = list(statuses)
    if not statuses:
        return 0
    total = sum((STATUS_WEIGHTS[s] for s in statuses), Decimal("0"))
    return int((total / len(statuses)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
