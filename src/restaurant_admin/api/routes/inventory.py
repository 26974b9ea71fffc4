from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.api.deps import PageParams, page_params
from restaurant_admin.crud import inventory as crud
from restaurant_admin.crud.common import build_page
from restaurant_admin.db.session import get_async_session
from restaurant_admin.schemas.common import ActiveFilter, ActiveToggle, Page
from restaurant_admin.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemRead,
    InventoryItemUpdate,
    InventoryStats,
    StockFilter,
)

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("/", response_model=Page[InventoryItemRead])
async def list_inventory(
    search: Optional[str] = Query(None, description="Поиск по названию"),
    status: ActiveFilter = Query(ActiveFilter.all),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    items, total = await crud.get_inventory_items(
        db, search=search, status=status, page=params.page, page_size=params.page_size
    )
    return build_page(
        [InventoryItemRead.from_orm_with_status(i) for i in items], total, params.page, params.page_size
    )


@router.get("/stock", response_model=Page[InventoryItemRead])
async def list_stock(
    search: Optional[str] = Query(None, description="Поиск по названию"),
    stock_status: StockFilter = Query(StockFilter.all, description="all | sufficient | low | out-of-stock"),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    items, total = await crud.get_inventory_items(
        db, search=search, stock=stock_status, page=params.page, page_size=params.page_size
    )
    return build_page(
        [InventoryItemRead.from_orm_with_status(i) for i in items], total, params.page, params.page_size
    )


@router.get("/stats", response_model=InventoryStats)
async def inventory_stats(db: AsyncSession = Depends(get_async_session)):
    return await crud.get_inventory_stats(db)


@router.get("/{item_id}", response_model=InventoryItemRead)
async def get_inventory_item(item_id: int, db: AsyncSession = Depends(get_async_session)):
    item = await crud.get_inventory_item_by_id(db, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return InventoryItemRead.from_orm_with_status(item)


@router.post("/", response_model=InventoryItemRead, status_code=201)
async def create_inventory_item_endpoint(
    item_in: InventoryItemCreate, db: AsyncSession = Depends(get_async_session)
):
    try:
        item = await crud.create_inventory_item(db, item_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return InventoryItemRead.from_orm_with_status(item)


@router.patch("/{item_id}", response_model=InventoryItemRead)
async def update_inventory_item_endpoint(
    item_id: int,
    item_in: InventoryItemUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    try:
        item = await crud.update_inventory_item(db, item_id, item_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not item:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return InventoryItemRead.from_orm_with_status(item)


@router.put("/{item_id}/active", response_model=InventoryItemRead)
async def toggle_inventory_item(
    item_id: int,
    toggle: ActiveToggle,
    db: AsyncSession = Depends(get_async_session),
):
    item = await crud.set_inventory_item_active(db, item_id, toggle.is_active)
    if not item:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return InventoryItemRead.from_orm_with_status(item)
