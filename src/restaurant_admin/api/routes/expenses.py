from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.api.deps import PageParams, page_params
from restaurant_admin.crud import expense as crud
from restaurant_admin.crud.common import build_page
from restaurant_admin.db.session import get_async_session
from restaurant_admin.schemas.common import Page
from restaurant_admin.schemas.expense import ExpenseCreate, ExpenseRead, ExpenseUpdate

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("/", response_model=Page[ExpenseRead])
async def list_expenses(
    search: Optional[str] = Query(None, description="Номер, тип или название"),
    expense_type: Optional[str] = Query(None, description="Название типа"),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    expenses, total = await crud.get_expenses(
        db, search=search, expense_type=expense_type, page=params.page, page_size=params.page_size
    )
    return build_page([ExpenseRead.from_orm_with_type(e) for e in expenses], total, params.page, params.page_size)


@router.get("/types", response_model=List[str])
async def list_used_types(db: AsyncSession = Depends(get_async_session)):
    return await crud.get_expense_type_names(db)


@router.get("/{expense_id}", response_model=ExpenseRead)
async def get_expense(expense_id: int, db: AsyncSession = Depends(get_async_session)):
    expense = await crud.get_expense_by_id(db, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return ExpenseRead.from_orm_with_type(expense)


@router.post("/", response_model=ExpenseRead, status_code=201)
async def create_expense_endpoint(expense_in: ExpenseCreate, db: AsyncSession = Depends(get_async_session)):
    try:
        expense = await crud.create_expense(db, expense_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ExpenseRead.from_orm_with_type(expense)


@router.patch("/{expense_id}", response_model=ExpenseRead)
async def update_expense_endpoint(
    expense_id: int,
    expense_in: ExpenseUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    try:
        expense = await crud.update_expense(db, expense_id, expense_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return ExpenseRead.from_orm_with_type(expense)


@router.delete("/{expense_id}", status_code=204)
async def remove_expense(expense_id: int, db: AsyncSession = Depends(get_async_session)):
    deleted = await crud.delete_expense(db, expense_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Expense not found")
