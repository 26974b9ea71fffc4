from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.api.deps import PageParams, page_params
from restaurant_admin.crud import category as crud
from restaurant_admin.crud.common import build_page
from restaurant_admin.db.session import get_async_session
from restaurant_admin.schemas.category import (
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    SubCategoryCreate,
    SubCategoryRead,
    SubCategoryUpdate,
)
from restaurant_admin.schemas.common import ActiveFilter, ActiveToggle, Page

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=Page[CategoryRead])
async def list_categories(
    search: Optional[str] = Query(None, description="Поиск по названию"),
    status: ActiveFilter = Query(ActiveFilter.all, description="all | active | inactive"),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    categories, total = await crud.get_categories(
        db, search=search, status=status, page=params.page, page_size=params.page_size
    )
    items = [CategoryRead.from_orm_with_count(c) for c in categories]
    return build_page(items, total, params.page, params.page_size)


@router.get("/sub-categories", response_model=Page[SubCategoryRead])
async def list_sub_categories(
    search: Optional[str] = Query(None, description="Поиск по названию"),
    status: ActiveFilter = Query(ActiveFilter.all, description="all | active | inactive"),
    category_id: Optional[int] = Query(None, description="Фильтр по категории"),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    subs, total = await crud.get_sub_categories(
        db,
        search=search,
        status=status,
        category_id=category_id,
        page=params.page,
        page_size=params.page_size,
    )
    items = [SubCategoryRead.from_orm_with_name(s) for s in subs]
    return build_page(items, total, params.page, params.page_size)


@router.post("/sub-categories", response_model=SubCategoryRead, status_code=201)
async def create_sub_category_endpoint(sub_in: SubCategoryCreate, db: AsyncSession = Depends(get_async_session)):
    try:
        sub = await crud.create_sub_category(db, sub_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SubCategoryRead.from_orm_with_name(sub)


@router.patch("/sub-categories/{sub_category_id}", response_model=SubCategoryRead)
async def update_sub_category_endpoint(
    sub_category_id: int,
    sub_in: SubCategoryUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    try:
        sub = await crud.update_sub_category(db, sub_category_id, sub_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not sub:
        raise HTTPException(status_code=404, detail="Sub-category not found")
    return SubCategoryRead.from_orm_with_name(sub)


@router.put("/sub-categories/{sub_category_id}/active", response_model=SubCategoryRead)
async def toggle_sub_category(
    sub_category_id: int,
    toggle: ActiveToggle,
    db: AsyncSession = Depends(get_async_session),
):
    sub = await crud.set_sub_category_active(db, sub_category_id, toggle.is_active)
    if not sub:
        raise HTTPException(status_code=404, detail="Sub-category not found")
    return SubCategoryRead.from_orm_with_name(sub)


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(category_id: int, db: AsyncSession = Depends(get_async_session)):
    category = await crud.get_category_by_id(db, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return CategoryRead.from_orm_with_count(category)


@router.post("/", response_model=CategoryRead, status_code=201)
async def create_category_endpoint(category_in: CategoryCreate, db: AsyncSession = Depends(get_async_session)):
    try:
        category = await crud.create_category(db, category_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CategoryRead.from_orm_with_count(category)


@router.patch("/{category_id}", response_model=CategoryRead)
async def update_category_endpoint(
    category_id: int,
    category_in: CategoryUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    try:
        category = await crud.update_category(db, category_id, category_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return CategoryRead.from_orm_with_count(category)


@router.put("/{category_id}/active", response_model=CategoryRead)
async def toggle_category(
    category_id: int,
    toggle: ActiveToggle,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Активирует или деактивирует категорию.
    """
    category = await crud.set_category_active(db, category_id, toggle.is_active)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return CategoryRead.from_orm_with_count(category)
