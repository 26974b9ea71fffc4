from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.api.deps import PageParams, page_params
from restaurant_admin.crud import menu_item as crud
from restaurant_admin.crud.common import build_page
from restaurant_admin.db.session import get_async_session
from restaurant_admin.schemas.common import ActiveFilter, ActiveToggle, Page
from restaurant_admin.schemas.menu_item import MenuItemCreate, MenuItemRead, MenuItemUpdate

router = APIRouter(prefix="/menu", tags=["menu"])


@router.get("/", response_model=Page[MenuItemRead])
async def list_menu_items(
    search: Optional[str] = Query(None, description="Поиск по названию"),
    category_id: Optional[int] = Query(None, description="Фильтр по категории"),
    status: ActiveFilter = Query(ActiveFilter.all, description="all | active | inactive"),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    items, total = await crud.get_menu_items(
        db,
        search=search,
        category_id=category_id,
        status=status,
        page=params.page,
        page_size=params.page_size,
    )
    return build_page([MenuItemRead.from_orm_with_names(i) for i in items], total, params.page, params.page_size)


@router.get("/{menu_item_id}", response_model=MenuItemRead)
async def get_menu_item(menu_item_id: int, db: AsyncSession = Depends(get_async_session)):
    item = await crud.get_menu_item_by_id(db, menu_item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return MenuItemRead.from_orm_with_names(item)


@router.post("/", response_model=MenuItemRead, status_code=201)
async def create_menu_item_endpoint(item_in: MenuItemCreate, db: AsyncSession = Depends(get_async_session)):
    try:
        item = await crud.create_menu_item(db, item_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MenuItemRead.from_orm_with_names(item)


@router.patch("/{menu_item_id}", response_model=MenuItemRead)
async def update_menu_item_endpoint(
    menu_item_id: int,
    item_in: MenuItemUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Частичное обновление блюда. Размеры, ингредиенты и добавки заменяются целиком.
    """
    try:
        item = await crud.update_menu_item(db, menu_item_id, item_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return MenuItemRead.from_orm_with_names(item)


@router.put("/{menu_item_id}/active", response_model=MenuItemRead)
async def toggle_menu_item(
    menu_item_id: int,
    toggle: ActiveToggle,
    db: AsyncSession = Depends(get_async_session),
):
    item = await crud.set_menu_item_active(db, menu_item_id, toggle.is_active)
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return MenuItemRead.from_orm_with_names(item)


@router.delete("/{menu_item_id}", status_code=204)
async def remove_menu_item(menu_item_id: int, db: AsyncSession = Depends(get_async_session)):
    try:
        deleted = await crud.delete_menu_item(db, menu_item_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Menu item not found")
