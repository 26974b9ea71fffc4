import logging
from typing import List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from restaurant_admin.crud.common import active_clause, apply_where, paginate, search_clause, update_fields
from restaurant_admin.models import Category, SubCategory
from restaurant_admin.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    SubCategoryCreate,
    SubCategoryUpdate,
)
from restaurant_admin.schemas.common import ActiveFilter

logger = logging.getLogger(__name__)


async def get_categories(
    db: AsyncSession,
    search: Optional[str] = None,
    status: Optional[ActiveFilter] = None,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[Category], int]:
    """
    Список категорий: поиск по названию, фильтр по активности, пагинация.
    """
    stmt = select(Category).options(selectinload(Category.sub_categories)).order_by(Category.id)
    stmt = apply_where(stmt, search_clause(search, Category.name), active_clause(Category.is_active, status))
    return await paginate(db, stmt, page, page_size)


async def get_category_by_id(db: AsyncSession, category_id: int) -> Optional[Category]:
    stmt = (
        select(Category)
        .where(Category.id == category_id)
        .options(selectinload(Category.sub_categories))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def _ensure_unique_name(db: AsyncSession, name: str, exclude_id: Optional[int] = None) -> None:
    stmt = select(Category.id).where(func.lower(Category.name) == name.lower())
    if exclude_id is not None:
        stmt = stmt.where(Category.id != exclude_id)
    if (await db.execute(stmt)).first():
        raise ValueError(f"Category '{name}' already exists")


async def create_category(db: AsyncSession, category_in: CategoryCreate) -> Category:
    await _ensure_unique_name(db, category_in.name)

    category = Category(**category_in.model_dump())
    db.add(category)
    await db.commit()
    logger.info("Category %s created: %s", category.id, category.name)
    return await get_category_by_id(db, category.id)


async def update_category(db: AsyncSession, category_id: int, category_in: CategoryUpdate) -> Optional[Category]:
    category = await db.get(Category, category_id)
    if not category:
        return None

    update_data = update_fields(category_in, nullable=("image",))
    if "name" in update_data:
        await _ensure_unique_name(db, update_data["name"], exclude_id=category_id)

    for key, value in update_data.items():
        setattr(category, key, value)

    await db.commit()
    logger.info("Category %s updated: %s", category_id, sorted(update_data))
    return await get_category_by_id(db, category_id)


async def set_category_active(db: AsyncSession, category_id: int, is_active: bool) -> Optional[Category]:
    category = await db.get(Category, category_id)
    if not category:
        return None
    category.is_active = is_active
    await db.commit()
    logger.info("Category %s %s", category_id, "activated" if is_active else "deactivated")
    return await get_category_by_id(db, category_id)


async def get_sub_categories(
    db: AsyncSession,
    search: Optional[str] = None,
    status: Optional[ActiveFilter] = None,
    category_id: Optional[int] = None,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[SubCategory], int]:
    stmt = select(SubCategory).options(selectinload(SubCategory.category)).order_by(SubCategory.id)
    stmt = apply_where(
        stmt,
        search_clause(search, SubCategory.name),
        active_clause(SubCategory.is_active, status),
    )
    if category_id is not None:
        stmt = stmt.where(SubCategory.category_id == category_id)
    return await paginate(db, stmt, page, page_size)


async def get_sub_category_by_id(db: AsyncSession, sub_category_id: int) -> Optional[SubCategory]:
    stmt = (
        select(SubCategory)
        .where(SubCategory.id == sub_category_id)
        .options(selectinload(SubCategory.category))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def create_sub_category(db: AsyncSession, sub_in: SubCategoryCreate) -> SubCategory:
    if not await db.get(Category, sub_in.category_id):
        raise ValueError(f"Category with id={sub_in.category_id} not found")

    sub = SubCategory(**sub_in.model_dump())
    db.add(sub)
    await db.commit()
    logger.info("Sub-category %s created in category %s", sub.id, sub.category_id)
    return await get_sub_category_by_id(db, sub.id)


async def update_sub_category(
    db: AsyncSession, sub_category_id: int, sub_in: SubCategoryUpdate
) -> Optional[SubCategory]:
    sub = await db.get(SubCategory, sub_category_id)
    if not sub:
        return None

    update_data = update_fields(sub_in)
    if "category_id" in update_data and not await db.get(Category, update_data["category_id"]):
        raise ValueError(f"Category with id={update_data['category_id']} not found")

    for key, value in update_data.items():
        setattr(sub, key, value)

    await db.commit()
    return await get_sub_category_by_id(db, sub_category_id)


async def set_sub_category_active(db: AsyncSession, sub_category_id: int, is_active: bool) -> Optional[SubCategory]:
    sub = await db.get(SubCategory, sub_category_id)
    if not sub:
        return None
    sub.is_active = is_active
    await db.commit()
    logger.info("Sub-category %s %s", sub_category_id, "activated" if is_active else "deactivated")
    return await get_sub_category_by_id(db, sub_category_id)
