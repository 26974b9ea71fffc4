from pydantic import BaseModel, Field, conint
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from restaurant_admin.models.order import OrderStatusEnum, OrderTypeEnum

CENT = Decimal("0.01")


class OrderItemRead(BaseModel):
    id: int
    menu_item_id: int
    name: str
    quantity: int
    price: Decimal
    total_price: Decimal
    status: OrderStatusEnum

    @classmethod
    def from_orm_with_total(cls, item):
        return cls(
            id=item.id,
            menu_item_id=item.menu_item_id,
            name=item.name,
            quantity=item.quantity,
            price=item.price,
            total_price=(Decimal(item.price) * item.quantity).quantize(CENT),
            status=item.status,
        )


class OrderRead(BaseModel):
    id: int
    table_id: Optional[int] = None
    table_no: Optional[str] = None
    order_type: OrderTypeEnum
    status: OrderStatusEnum
    created_at: datetime
    closed_at: Optional[datetime] = None
    items: List[OrderItemRead] = []
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total_amount: Decimal
    count_items: int

    @classmethod
    def from_orm_with_name(cls, order):
        subtotal = order_subtotal(order)
        count = sum(item.quantity for item in order.items)
        tax = Decimal(order.tax or 0)
        discount = Decimal(order.discount or 0)

        return cls(
            id=order.id,
            table_id=order.table_id,
            table_no=order.table.table_no if getattr(order, "table", None) else None,
            order_type=order.order_type,
            status=order.status,
            created_at=order.created_at,
            closed_at=order.closed_at,
            items=[OrderItemRead.from_orm_with_total(i) for i in order.items],
            subtotal=subtotal,
            tax=tax.quantize(CENT),
            discount=discount.quantize(CENT),
            total_amount=(subtotal + tax - discount).quantize(CENT),
            count_items=count,
        )


def order_subtotal(order) -> Decimal:
    total = sum(
        ((item.price or Decimal("0")) * item.quantity for item in order.items), Decimal("0")
    )
    return Decimal(total).quantize(CENT)


class OrderItemCreate(BaseModel):
    menu_item_id: int
    quantity: conint(ge=1) = 1


class OrderCreate(BaseModel):
    table_id: Optional[int] = None
    order_type: OrderTypeEnum = OrderTypeEnum.dine_in
    tax: Decimal = Field(Decimal("0"), ge=0)
    discount: Decimal = Field(Decimal("0"), ge=0)
    items: List[OrderItemCreate] = Field(..., min_length=1)


class OrderUpdate(BaseModel):
    table_id: Optional[int] = None
    order_type: Optional[OrderTypeEnum] = None
    tax: Optional[Decimal] = Field(None, ge=0)
    discount: Optional[Decimal] = Field(None, ge=0)
    # статус заказа проставляется всем позициям
    status: Optional[OrderStatusEnum] = None

    class Config:
        extra = "forbid"


class OrderItemStatusUpdate(BaseModel):
    status: OrderStatusEnum


class OrderStats(BaseModel):
    total: int
    in_progress: int
    delivered: int


class KitchenOrderRead(OrderRead):
    progress: int

    @classmethod
    def from_orm_with_progress(cls, order, progress: int):
        return cls(**OrderRead.from_orm_with_name(order).model_dump(), progress=progress)


class KitchenBoard(BaseModel):
    receive: List[KitchenOrderRead] = []
    preparing: List[KitchenOrderRead] = []
    ready: List[KitchenOrderRead] = []
    served: List[KitchenOrderRead] = []
