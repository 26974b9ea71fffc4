import logging
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from restaurant_admin.crud.order import get_served_revenue, get_top_menu_items
from restaurant_admin.crud.user import count_users
from restaurant_admin.db.base import utcnow
from restaurant_admin.models import Order, OrderStatusEnum
from restaurant_admin.schemas.dashboard import OverviewPeriod
from restaurant_admin.schemas.order import order_subtotal

logger = logging.getLogger(__name__)

# окно по умолчанию: 7 дней, 8 недель, 6 месяцев
DEFAULT_WINDOW = {
    OverviewPeriod.day: 7,
    OverviewPeriod.week: 8,
    OverviewPeriod.month: 6,
}


async def get_summary(db: AsyncSession) -> dict:
    total_orders = (await db.execute(select(func.count(Order.id)))).scalar_one()
    result = await db.execute(
        select(Order)
        .options(selectinload(Order.items), selectinload(Order.table))
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(5)
    )
    return {
        "total_orders": total_orders,
        "total_revenue": await get_served_revenue(db),
        "total_staff": await count_users(db),
        "top_items": await get_top_menu_items(db, limit=5),
        "recent_orders": result.scalars().unique().all(),
    }


def bucket_start(day: date, period: OverviewPeriod) -> date:
    if period == OverviewPeriod.week:
        return day - timedelta(days=day.weekday())
    if period == OverviewPeriod.month:
        return day.replace(day=1)
    return day


def _shift_months(day: date, months: int) -> date:
    index = day.year * 12 + day.month - 1 - months
    return date(index // 12, index % 12 + 1, 1)


def bucket_starts(today: date, period: OverviewPeriod, count: int) -> List[date]:
    """Начала count последних интервалов, по возрастанию, последний: текущий."""
    current = bucket_start(today, period)
    if period == OverviewPeriod.month:
        return [_shift_months(current, n) for n in range(count - 1, -1, -1)]
    step = timedelta(days=7 if period == OverviewPeriod.week else 1)
    return [current - step * n for n in range(count - 1, -1, -1)]


async def get_overview(
    db: AsyncSession,
    period: OverviewPeriod = OverviewPeriod.day,
    count: Optional[int] = None,
    today: Optional[date] = None,
) -> dict:
    """
    Количество заказов и выручка (по поданным заказам) по дням, неделям или месяцам.
    """
    today = today or utcnow().date()
    starts = bucket_starts(today, period, count or DEFAULT_WINDOW[period])
    since = datetime.combine(starts[0], time.min, tzinfo=timezone.utc)

    result = await db.execute(
        select(Order).options(selectinload(Order.items)).where(Order.created_at >= since)
    )
    buckets = {start: {"start": start, "orders": 0, "revenue": Decimal("0")} for start in starts}
    for order in result.scalars().unique().all():
        bucket = buckets.get(bucket_start(order.created_at.date(), period))
        if bucket is None:
            continue
        bucket["orders"] += 1
        if order.status == OrderStatusEnum.served:
            bucket["revenue"] += order_subtotal(order) + Decimal(order.tax or 0) - Decimal(order.discount or 0)

    logger.debug("Overview %s since %s: %d buckets", period.value, starts[0], len(starts))
    return {"period": period, "buckets": list(buckets.values())}
