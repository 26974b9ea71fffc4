from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.api.deps import PageParams, page_params
from restaurant_admin.crud import expense as crud
from restaurant_admin.crud.common import build_page
from restaurant_admin.db.session import get_async_session
from restaurant_admin.schemas.common import ActiveFilter, ActiveToggle, Page
from restaurant_admin.schemas.expense import ExpenseTypeCreate, ExpenseTypeRead, ExpenseTypeUpdate

router = APIRouter(prefix="/expense-types", tags=["expenses"])


@router.get("/", response_model=Page[ExpenseTypeRead])
async def list_expense_types(
    search: Optional[str] = Query(None, description="Поиск по названию"),
    status: ActiveFilter = Query(ActiveFilter.all),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    types, total = await crud.get_expense_types(
        db, search=search, status=status, page=params.page, page_size=params.page_size
    )
    return build_page(types, total, params.page, params.page_size)


@router.post("/", response_model=ExpenseTypeRead, status_code=201)
async def create_expense_type_endpoint(type_in: ExpenseTypeCreate, db: AsyncSession = Depends(get_async_session)):
    try:
        return await crud.create_expense_type(db, type_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/{type_id}", response_model=ExpenseTypeRead)
async def update_expense_type_endpoint(
    type_id: int,
    type_in: ExpenseTypeUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    try:
        expense_type = await crud.update_expense_type(db, type_id, type_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not expense_type:
        raise HTTPException(status_code=404, detail="Expense type not found")
    return expense_type


@router.put("/{type_id}/active", response_model=ExpenseTypeRead)
async def toggle_expense_type(
    type_id: int,
    toggle: ActiveToggle,
    db: AsyncSession = Depends(get_async_session),
):
    expense_type = await crud.set_expense_type_active(db, type_id, toggle.is_active)
    if not expense_type:
        raise HTTPException(status_code=404, detail="Expense type not found")
    return expense_type
