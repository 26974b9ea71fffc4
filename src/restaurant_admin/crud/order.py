import logging
from datetime import timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select, func, cast, desc, or_, String
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from restaurant_admin.crud.common import paginate, update_fields
from restaurant_admin.crud.day import get_current_day
from restaurant_admin.db.base import utcnow
from restaurant_admin.models import DiningTable, MenuItem, Order, OrderItem, OrderStatusEnum
from restaurant_admin.schemas.order import OrderCreate, OrderUpdate, order_subtotal
from restaurant_admin.services.kitchen import BOARD_COLUMNS, derive_order_status, next_status, order_progress

logger = logging.getLogger(__name__)

SERVED_WINDOW = timedelta(hours=24)


def _with_relations(stmt):
    return stmt.options(selectinload(Order.items), selectinload(Order.table))


def _search_clause(term: Optional[str]):
    """Поиск по номеру заказа, номеру стола и названиям позиций."""
    if not term:
        return None
    return or_(
        cast(Order.id, String).icontains(term, autoescape=True),
        Order.table.has(DiningTable.table_no.icontains(term, autoescape=True)),
        Order.items.any(OrderItem.name.icontains(term, autoescape=True)),
    )


async def get_orders(
    db: AsyncSession,
    search: Optional[str] = None,
    status: Optional[OrderStatusEnum] = None,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[Order], int]:
    """
    Возвращает страницу заказов с опциональным поиском и фильтром по статусу.
    Подгружаем items и table.
    Сортируем по created_at (новые первыми).
    """
    stmt = _with_relations(select(Order)).order_by(Order.created_at.desc(), Order.id.desc())

    clause = _search_clause(search)
    if clause is not None:
        stmt = stmt.where(clause)
    if status:
        stmt = stmt.where(Order.status == status)

    return await paginate(db, stmt, page, page_size)


async def get_order_by_id(db: AsyncSession, order_id: int) -> Optional[Order]:
    """
    Возвращает заказ по ID с подгруженными items и table.
    Предотвращает MissingGreenlet при сериализации.
    """
    stmt = (
        _with_relations(select(Order))
        .where(Order.id == order_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalars().unique().first()


def refresh_order_status(order: Order) -> OrderStatusEnum:
    """
    Пересчитывает статус заказа по позициям.
    closed_at ставится, когда заказ подан целиком, и сбрасывается при откате.
    """
    status = derive_order_status(item.status for item in order.items)
    order.status = status
    if status == OrderStatusEnum.served:
        if order.closed_at is None:
            order.closed_at = utcnow()
    else:
        order.closed_at = None
    return status


async def _check_table(db: AsyncSession, table_id: int) -> None:
    table = await db.get(DiningTable, table_id)
    if not table:
        raise ValueError(f"Table with id={table_id} not found")
    if not table.is_active:
        raise ValueError(f"Table {table.table_no} is not active")


def _check_total(order: Order) -> None:
    total = order_subtotal(order) + Decimal(order.tax or 0) - Decimal(order.discount or 0)
    if total < 0:
        raise ValueError("Discount exceeds order total")


async def create_order(db: AsyncSession, order_in: OrderCreate) -> Order:
    """
    Создаём заказ и позиции. Название и цена позиции фиксируются на момент заказа:
    берётся первый размер блюда, цена по акции, если она есть.
    """
    if order_in.table_id is not None:
        await _check_table(db, order_in.table_id)

    menu_ids = {item.menu_item_id for item in order_in.items}
    result = await db.execute(
        select(MenuItem).where(MenuItem.id.in_(menu_ids)).options(selectinload(MenuItem.sizes))
    )
    menu = {m.id: m for m in result.scalars().all()}

    order = Order(
        table_id=order_in.table_id,
        order_type=order_in.order_type,
        tax=order_in.tax,
        discount=order_in.discount,
        status=OrderStatusEnum.receive,
    )
    for item in order_in.items:
        menu_item = menu.get(item.menu_item_id)
        if not menu_item:
            raise ValueError(f"Menu item with id={item.menu_item_id} not found")
        if not menu_item.is_active:
            raise ValueError(f"Menu item '{menu_item.name}' is not available")
        if not menu_item.sizes:
            raise ValueError(f"Menu item '{menu_item.name}' has no price")

        size = menu_item.sizes[0]
        order.items.append(
            OrderItem(
                menu_item_id=menu_item.id,
                name=menu_item.name,
                quantity=item.quantity,
                price=size.offer_price if size.offer_price is not None else size.regular_price,
                status=OrderStatusEnum.receive,
            )
        )
    _check_total(order)

    db.add(order)
    await db.commit()
    logger.info("Order %s created with %d item(s)", order.id, len(order_in.items))

    # загружаем заказ обратно с items и table
    return await get_order_by_id(db, order.id)


async def update_order(db: AsyncSession, order_id: int, order_in: OrderUpdate) -> Optional[Order]:
    """
    Обновляет заказ. Статус заказа применяется ко всем позициям.
    """
    order = await get_order_by_id(db, order_id)
    if not order:
        return None

    update_data = update_fields(order_in, nullable=("table_id",))

    if update_data.get("table_id") is not None:
        await _check_table(db, update_data["table_id"])

    if "status" in update_data:
        status = update_data.pop("status")
        for item in order.items:
            item.status = status

    # Остальные поля
    for key, value in update_data.items():
        setattr(order, key, value)
    _check_total(order)

    new_status = refresh_order_status(order)
    await db.commit()
    logger.info("Order %s updated, status=%s", order_id, new_status.value)

    return await get_order_by_id(db, order_id)


async def set_item_status(
    db: AsyncSession, order_id: int, item_id: int, status: OrderStatusEnum
) -> Optional[Order]:
    """
    Меняет статус позиции и пересчитывает статус заказа.
    """
    order = await get_order_by_id(db, order_id)
    if not order:
        return None

    item = next((i for i in order.items if i.id == item_id), None)
    if item is None:
        raise ValueError(f"Item with id={item_id} not found in order {order_id}")

    old = item.status
    item.status = status
    new_status = refresh_order_status(order)
    await db.commit()
    logger.info(
        "Order %s item %s: %s -> %s (order %s)", order_id, item_id, old.value, status.value, new_status.value
    )

    return await get_order_by_id(db, order_id)


async def advance_item(db: AsyncSession, order_id: int, item_id: int) -> Optional[Order]:
    """
    Переводит позицию на следующий шаг кухни: Receive -> Preparing -> Ready -> Served.
    """
    order = await get_order_by_id(db, order_id)
    if not order:
        return None

    item = next((i for i in order.items if i.id == item_id), None)
    if item is None:
        raise ValueError(f"Item with id={item_id} not found in order {order_id}")

    target = next_status(item.status)
    if target is None:
        logger.warning("Order %s item %s is already served", order_id, item_id)
        raise ValueError("Item is already served")

    return await set_item_status(db, order_id, item_id, target)


async def delete_order(session: AsyncSession, order_id: int) -> bool:
    """
    Удаляет заказ.
    """
    order = await get_order_by_id(session, order_id)
    if not order:
        return False
    await session.delete(order)
    await session.commit()
    logger.info("Order %s deleted", order_id)
    return True


async def get_order_stats(db: AsyncSession) -> dict:
    """
    Счётчики для карточек: всего, готовятся, выданы (Ready или Served).
    """
    total = (await db.execute(select(func.count(Order.id)))).scalar_one()
    in_progress = (
        await db.execute(select(func.count(Order.id)).where(Order.status == OrderStatusEnum.preparing))
    ).scalar_one()
    delivered = (
        await db.execute(
            select(func.count(Order.id)).where(
                Order.status.in_([OrderStatusEnum.ready, OrderStatusEnum.served])
            )
        )
    ).scalar_one()
    return {"total": total, "in_progress": in_progress, "delivered": delivered}


async def get_kitchen_board(db: AsyncSession) -> dict:
    """
    Заказы по колонкам кухонного экрана. Статус выводится заново из позиций.
    Старые заказы первыми, как в очереди.
    Поданные заказы показываются только за текущий рабочий день,
    а если день не открыт, за последние сутки.
    """
    day = await get_current_day(db)
    if day is not None and day.closed_at is None:
        served_since = day.opened_at
    else:
        served_since = utcnow() - SERVED_WINDOW

    stmt = (
        _with_relations(select(Order))
        .where(or_(Order.status != OrderStatusEnum.served, Order.closed_at >= served_since))
        .order_by(Order.created_at, Order.id)
    )
    result = await db.execute(stmt)
    orders = result.scalars().unique().all()

    board = {column: [] for column in BOARD_COLUMNS}
    by_status = {status: column for column, status in BOARD_COLUMNS.items()}
    for order in orders:
        statuses = [item.status for item in order.items]
        status = derive_order_status(statuses)
        board[by_status[status]].append((order, order_progress(statuses)))
    return board


async def get_top_menu_items(
    db: AsyncSession,
    limit: int = 5
) -> list[dict]:
    """
    Возвращает топ самых популярных блюд по количеству заказанных позиций.
    """
    stmt = (
        select(
            OrderItem.menu_item_id.label("menu_item_id"),
            OrderItem.name.label("menu_item_name"),
            func.sum(OrderItem.quantity).label("total_sold"),
        )
        .group_by(OrderItem.menu_item_id, OrderItem.name)
        .order_by(desc("total_sold"), OrderItem.name)
        .limit(limit)
    )

    result = await db.execute(stmt)
    return [
        {
            "menu_item_id": row.menu_item_id,
            "menu_item_name": row.menu_item_name,
            "total_sold": int(row.total_sold or 0),
        }
        for row in result.all()
    ]


async def get_served_revenue(db: AsyncSession) -> Decimal:
    """Выручка по поданным заказам: позиции + налог - скидка."""
    items_total = (
        await db.execute(
            select(func.coalesce(func.sum(OrderItem.price * OrderItem.quantity), 0))
            .join(Order, Order.id == OrderItem.order_id)
            .where(Order.status == OrderStatusEnum.served)
        )
    ).scalar_one()
    adjustments = (
        await db.execute(
            select(func.coalesce(func.sum(Order.tax - Order.discount), 0)).where(
                Order.status == OrderStatusEnum.served
            )
        )
    ).scalar_one()
    return (Decimal(str(items_total)) + Decimal(str(adjustments))).quantize(Decimal("0.01"))
