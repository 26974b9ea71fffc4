import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.db.base import utcnow
from restaurant_admin.models import BusinessDay

logger = logging.getLogger(__name__)


def duration_hours(opened_at: datetime, closed_at: Optional[datetime] = None) -> float:
    """Длительность дня в часах, один знак после запятой. Открытый день: до текущего момента."""
    end = closed_at or utcnow()
    if opened_at.tzinfo is None:
        # SQLite возвращает naive datetime
        end = end.replace(tzinfo=None)
    return round((end - opened_at).total_seconds() / 3600, 1)


async def get_current_day(db: AsyncSession) -> Optional[BusinessDay]:
    result = await db.execute(select(BusinessDay).order_by(BusinessDay.id.desc()).limit(1))
    return result.scalars().first()


def day_status(day: Optional[BusinessDay]) -> dict:
    if day is None:
        return {"is_open": False, "opened_at": None, "closed_at": None, "duration_hours": None}
    return {
        "is_open": day.closed_at is None,
        "opened_at": day.opened_at,
        "closed_at": day.closed_at,
        "duration_hours": duration_hours(day.opened_at, day.closed_at),
    }


async def open_day(db: AsyncSession) -> BusinessDay:
    current = await get_current_day(db)
    if current is not None and current.closed_at is None:
        logger.warning("Day %s is already open", current.id)
        raise ValueError("Day is already open")

    day = BusinessDay(opened_at=utcnow())
    db.add(day)
    await db.commit()
    await db.refresh(day)
    logger.info("Day %s opened at %s", day.id, day.opened_at)
    return day


async def close_day(db: AsyncSession) -> BusinessDay:
    current = await get_current_day(db)
    if current is None or current.closed_at is not None:
        logger.warning("Close requested but no day is open")
        raise ValueError("Day is not open")

    current.closed_at = utcnow()
    await db.commit()
    await db.refresh(current)
    logger.info("Day %s closed after %s h", current.id, duration_hours(current.opened_at, current.closed_at))
    return current
