import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.crud.common import active_clause, apply_where, paginate, search_clause, update_fields
from restaurant_admin.models import DiningTable
from restaurant_admin.schemas.common import ActiveFilter
from restaurant_admin.schemas.table import TableCreate, TableUpdate

logger = logging.getLogger(__name__)


async def get_tables(
    db: AsyncSession,
    search: Optional[str] = None,
    status: Optional[ActiveFilter] = None,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[DiningTable], int]:
    stmt = select(DiningTable).order_by(DiningTable.id)
    stmt = apply_where(stmt, search_clause(search, DiningTable.table_no), active_clause(DiningTable.is_active, status))
    return await paginate(db, stmt, page, page_size)


async def get_table_by_id(db: AsyncSession, table_id: int) -> Optional[DiningTable]:
    return await db.get(DiningTable, table_id)


async def _ensure_unique_no(db: AsyncSession, table_no: str, exclude_id: Optional[int] = None) -> None:
    stmt = select(DiningTable.id).where(DiningTable.table_no == table_no)
    if exclude_id is not None:
        stmt = stmt.where(DiningTable.id != exclude_id)
    if (await db.execute(stmt)).first():
        raise ValueError(f"Table '{table_no}' already exists")


async def create_table(db: AsyncSession, table_in: TableCreate) -> DiningTable:
    await _ensure_unique_no(db, table_in.table_no)
    table = DiningTable(**table_in.model_dump())
    db.add(table)
    await db.commit()
    await db.refresh(table)
    logger.info("Table %s created (no=%s)", table.id, table.table_no)
    return table


async def update_table(db: AsyncSession, table_id: int, table_in: TableUpdate) -> Optional[DiningTable]:
    table = await db.get(DiningTable, table_id)
    if not table:
        return None

    update_data = update_fields(table_in)
    if "table_no" in update_data:
        await _ensure_unique_no(db, update_data["table_no"], exclude_id=table_id)
    for key, value in update_data.items():
        setattr(table, key, value)

    await db.commit()
    await db.refresh(table)
    return table


async def set_table_active(db: AsyncSession, table_id: int, is_active: bool) -> Optional[DiningTable]:
    table = await db.get(DiningTable, table_id)
    if not table:
        return None
    table.is_active = is_active
    await db.commit()
    await db.refresh(table)
    logger.info("Table %s %s", table.table_no, "activated" if is_active else "deactivated")
    return table
