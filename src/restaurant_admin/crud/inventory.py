import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select, and_, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from restaurant_admin.crud.common import active_clause, apply_where, paginate, search_clause, update_fields
from restaurant_admin.db.base import utcnow
from restaurant_admin.models import InventoryItem, Purchase
from restaurant_admin.schemas.common import ActiveFilter
from restaurant_admin.schemas.inventory import InventoryItemCreate, InventoryItemUpdate, StockFilter

logger = logging.getLogger(__name__)


def _stock_clause(stock: Optional[StockFilter]):
    """Условие по уровню запаса, совпадает с stock_status()."""
    if stock is None or stock == StockFilter.all:
        return None
    if stock == StockFilter.out_of_stock:
        return InventoryItem.quantity <= 0
    if stock == StockFilter.low:
        return and_(InventoryItem.quantity > 0, InventoryItem.quantity <= InventoryItem.low_threshold)
    return and_(InventoryItem.quantity > 0, InventoryItem.quantity > InventoryItem.low_threshold)


async def get_inventory_items(
    db: AsyncSession,
    search: Optional[str] = None,
    status: Optional[ActiveFilter] = None,
    stock: Optional[StockFilter] = None,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[InventoryItem], int]:
    stmt = select(InventoryItem).order_by(InventoryItem.name)
    stmt = apply_where(
        stmt,
        search_clause(search, InventoryItem.name),
        active_clause(InventoryItem.is_active, status),
        _stock_clause(stock),
    )
    return await paginate(db, stmt, page, page_size)


async def get_inventory_item_by_id(db: AsyncSession, item_id: int) -> Optional[InventoryItem]:
    return await db.get(InventoryItem, item_id)


async def _ensure_unique_name(db: AsyncSession, name: str, exclude_id: Optional[int] = None) -> None:
    stmt = select(InventoryItem.id).where(func.lower(InventoryItem.name) == name.lower())
    if exclude_id is not None:
        stmt = stmt.where(InventoryItem.id != exclude_id)
    if (await db.execute(stmt)).first():
        raise ValueError(f"Inventory item '{name}' already exists")


async def create_inventory_item(db: AsyncSession, item_in: InventoryItemCreate) -> InventoryItem:
    await _ensure_unique_name(db, item_in.name)
    item = InventoryItem(**item_in.model_dump())
    db.add(item)
    await db.commit()
    await db.refresh(item)
    logger.info("Inventory item %s created: %s", item.id, item.name)
    return item


async def update_inventory_item(
    db: AsyncSession, item_id: int, item_in: InventoryItemUpdate
) -> Optional[InventoryItem]:
    item = await db.get(InventoryItem, item_id)
    if not item:
        return None

    update_data = update_fields(item_in)
    if "name" in update_data:
        await _ensure_unique_name(db, update_data["name"], exclude_id=item_id)
    for key, value in update_data.items():
        setattr(item, key, value)

    await db.commit()
    await db.refresh(item)
    logger.info("Inventory item %s updated: %s", item_id, sorted(update_data))
    return item


async def set_inventory_item_active(db: AsyncSession, item_id: int, is_active: bool) -> Optional[InventoryItem]:
    item = await db.get(InventoryItem, item_id)
    if not item:
        return None
    item.is_active = is_active
    await db.commit()
    await db.refresh(item)
    logger.info("Inventory item %s %s", item.name, "activated" if is_active else "deactivated")
    return item


async def _spend_between(db: AsyncSession, start: date, end: date) -> Decimal:
    result = await db.execute(
        select(Purchase)
        .where(Purchase.purchase_date >= start, Purchase.purchase_date <= end)
        .options(selectinload(Purchase.items))
    )
    return sum((p.total_amount for p in result.scalars().all()), Decimal("0")).quantize(Decimal("0.01"))


async def get_inventory_stats(db: AsyncSession, today: Optional[date] = None) -> dict:
    """
    Траты на закупки: за сегодня и с начала текущего месяца.
    """
    today = today or utcnow().date()
    return {
        "today_spend": await _spend_between(db, today, today),
        "monthly_spend": await _spend_between(db, today.replace(day=1), today),
    }
