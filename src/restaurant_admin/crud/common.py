import math
from datetime import date, datetime, time, timezone
from typing import Optional, Sequence, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.schemas.common import ActiveFilter


def search_clause(term: Optional[str], *columns):
    """
    Поиск подстроки без учёта регистра по нескольким колонкам (OR).
    Пустая строка: без фильтра.
    """
    if not term:
        return None
    return or_(*(column.icontains(term, autoescape=True) for column in columns))


def active_clause(column, status: Optional[ActiveFilter]):
    if status is None or status == ActiveFilter.all:
        return None
    if status == ActiveFilter.active:
        return column.is_(True)
    return column.is_(False)


def update_fields(schema, nullable=()) -> dict:
    """
    Поля частичного обновления. Явный null сбрасывает только колонки из nullable,
    для остальных поле считается непереданным.
    """
    data = schema.model_dump(exclude_unset=True)
    return {key: value for key, value in data.items() if value is not None or key in nullable}


def apply_where(stmt, *clauses):
    for clause in clauses:
        if clause is not None:
            stmt = stmt.where(clause)
    return stmt


def day_bounds(date_from: Optional[date], date_to: Optional[date]) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Диапазон дат включительно: с 00:00 первого дня до конца последнего."""
    start = datetime.combine(date_from, time.min, tzinfo=timezone.utc) if date_from else None
    end = datetime.combine(date_to, time.max, tzinfo=timezone.utc) if date_to else None
    return start, end


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if page_size else 0


async def paginate(db: AsyncSession, stmt, page: int, page_size: int) -> Tuple[Sequence, int]:
    """
    Возвращает (записи страницы, общее количество).
    Страница за пределами: пустой список.
    """
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await db.execute(count_stmt)).scalar_one()

    result = await db.execute(stmt.limit(page_size).offset((page - 1) * page_size))
    return result.scalars().unique().all(), total


def page_slice(rows: list, page: int, page_size: int) -> list:
    start = (page - 1) * page_size
    return rows[start:start + page_size]


def build_page(items: list, total: int, page: int, page_size: int) -> dict:
    return {
        "items": items,
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": total_pages(total, page_size),
    }
