from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.api.deps import PageParams, page_params
from restaurant_admin.crud import order as crud
from restaurant_admin.crud.common import build_page
from restaurant_admin.db.session import get_async_session
from restaurant_admin.models.order import OrderStatusEnum
from restaurant_admin.schemas.common import Page
from restaurant_admin.schemas.order import (
    OrderCreate,
    OrderItemStatusUpdate,
    OrderRead,
    OrderStats,
    OrderUpdate,
)

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("/", response_model=Page[OrderRead])
async def list_orders(
    search: Optional[str] = Query(None, description="Номер заказа, стол или блюдо"),
    status: Optional[OrderStatusEnum] = Query(None, description="Фильтр по статусу"),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    orders, total = await crud.get_orders(
        db, search=search, status=status, page=params.page, page_size=params.page_size
    )
    return build_page([OrderRead.from_orm_with_name(o) for o in orders], total, params.page, params.page_size)


@router.get("/stats", response_model=OrderStats)
async def order_stats(db: AsyncSession = Depends(get_async_session)):
    return await crud.get_order_stats(db)


@router.get("/{order_id}", response_model=OrderRead)
async def get_order(order_id: int, db: AsyncSession = Depends(get_async_session)):
    order = await crud.get_order_by_id(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return OrderRead.from_orm_with_name(order)


@router.post("/", response_model=OrderRead, status_code=201)
async def create_order_endpoint(order_in: OrderCreate, db: AsyncSession = Depends(get_async_session)):
    try:
        order = await crud.create_order(db, order_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return OrderRead.from_orm_with_name(order)


@router.patch("/{order_id}", response_model=OrderRead)
async def update_order_endpoint(
    order_id: int,
    order_in: OrderUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Частичное обновление заказа. Переданный статус применяется ко всем позициям.
    """
    try:
        order = await crud.update_order(db, order_id, order_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return OrderRead.from_orm_with_name(order)


@router.patch("/{order_id}/items/{item_id}", response_model=OrderRead)
async def update_item_status(
    order_id: int,
    item_id: int,
    body: OrderItemStatusUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    try:
        order = await crud.set_item_status(db, order_id, item_id, body.status)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return OrderRead.from_orm_with_name(order)


@router.delete("/{order_id}", status_code=204)
async def remove_order(order_id: int, db: AsyncSession = Depends(get_async_session)):
    deleted = await crud.delete_order(db, order_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Order not found")
