from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.api.deps import PageParams, page_params
from restaurant_admin.crud import table as crud
from restaurant_admin.crud.common import build_page
from restaurant_admin.db.session import get_async_session
from restaurant_admin.schemas.common import ActiveFilter, ActiveToggle, Page
from restaurant_admin.schemas.table import TableCreate, TableRead, TableUpdate

router = APIRouter(prefix="/tables", tags=["tables"])


@router.get("/", response_model=Page[TableRead])
async def list_tables(
    search: Optional[str] = Query(None, description="Поиск по номеру стола"),
    status: ActiveFilter = Query(ActiveFilter.all, description="all | active | inactive"),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_async_session),
):
    tables, total = await crud.get_tables(
        db, search=search, status=status, page=params.page, page_size=params.page_size
    )
    return build_page([TableRead.model_validate(t) for t in tables], total, params.page, params.page_size)


@router.get("/{table_id}", response_model=TableRead)
async def get_table(table_id: int, db: AsyncSession = Depends(get_async_session)):
    table = await crud.get_table_by_id(db, table_id)
    if not table:
        raise HTTPException(status_code=404, detail="Table not found")
    return table


@router.post("/", response_model=TableRead, status_code=201)
async def create_table_endpoint(table_in: TableCreate, db: AsyncSession = Depends(get_async_session)):
    try:
        return await crud.create_table(db, table_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/{table_id}", response_model=TableRead)
async def update_table_endpoint(table_id: int, table_in: TableUpdate, db: AsyncSession = Depends(get_async_session)):
    try:
        table = await crud.update_table(db, table_id, table_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not table:
        raise HTTPException(status_code=404, detail="Table not found")
    return table


@router.put("/{table_id}/active", response_model=TableRead)
async def toggle_table(table_id: int, toggle: ActiveToggle, db: AsyncSession = Depends(get_async_session)):
    table = await crud.set_table_active(db, table_id, toggle.is_active)
    if not table:
        raise HTTPException(status_code=404, detail="Table not found")
    return table
