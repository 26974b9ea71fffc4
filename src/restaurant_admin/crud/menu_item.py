import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from restaurant_admin.crud.common import active_clause, apply_where, paginate, search_clause, update_fields
from restaurant_admin.models import (
    Category,
    InventoryItem,
    MenuItem,
    MenuItemExtra,
    MenuItemIngredient,
    MenuItemSize,
    OrderItem,
    SubCategory,
)
from restaurant_admin.schemas.common import ActiveFilter
from restaurant_admin.schemas.menu_item import MenuItemCreate, MenuItemUpdate

logger = logging.getLogger(__name__)


def _with_relations(stmt):
    return stmt.options(
        selectinload(MenuItem.category),
        selectinload(MenuItem.sub_category),
        selectinload(MenuItem.sizes),
        selectinload(MenuItem.ingredients).selectinload(MenuItemIngredient.inventory_item),
        selectinload(MenuItem.extras),
    )


async def get_menu_items(
    db: AsyncSession,
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    status: Optional[ActiveFilter] = None,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[MenuItem], int]:
    """
    Список блюд: поиск по названию, фильтр по категории и активности.
    Новые первыми.
    """
    stmt = _with_relations(select(MenuItem)).order_by(MenuItem.created_at.desc(), MenuItem.id.desc())
    stmt = apply_where(stmt, search_clause(search, MenuItem.name), active_clause(MenuItem.is_active, status))
    if category_id is not None:
        stmt = stmt.where(MenuItem.category_id == category_id)
    return await paginate(db, stmt, page, page_size)


async def get_menu_item_by_id(db: AsyncSession, menu_item_id: int) -> Optional[MenuItem]:
    stmt = (
        _with_relations(select(MenuItem))
        .where(MenuItem.id == menu_item_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def _validate_refs(
    db: AsyncSession,
    category_id: int,
    sub_category_id: Optional[int],
    ingredient_ids: List[int],
) -> None:
    if not await db.get(Category, category_id):
        raise ValueError(f"Category with id={category_id} not found")

    if sub_category_id is not None:
        sub = await db.get(SubCategory, sub_category_id)
        if not sub:
            raise ValueError(f"Sub-category with id={sub_category_id} not found")
        if sub.category_id != category_id:
            raise ValueError(f"Sub-category {sub_category_id} does not belong to category {category_id}")

    if ingredient_ids:
        result = await db.execute(select(InventoryItem.id).where(InventoryItem.id.in_(ingredient_ids)))
        missing = set(ingredient_ids) - set(result.scalars().all())
        if missing:
            raise ValueError(f"Inventory items not found: {sorted(missing)}")


def _build_children(menu_item: MenuItem, data: dict) -> None:
    if data.get("sizes") is not None:
        menu_item.sizes = [MenuItemSize(**s) for s in data["sizes"]]
    if data.get("ingredients") is not None:
        menu_item.ingredients = [MenuItemIngredient(**i) for i in data["ingredients"]]
    if data.get("extras") is not None:
        menu_item.extras = [MenuItemExtra(**e) for e in data["extras"]]


async def create_menu_item(db: AsyncSession, item_in: MenuItemCreate) -> MenuItem:
    data = item_in.model_dump()
    await _validate_refs(
        db,
        data["category_id"],
        data["sub_category_id"],
        [i["inventory_item_id"] for i in data["ingredients"]],
    )

    children = {key: data.pop(key) for key in ("sizes", "ingredients", "extras")}
    menu_item = MenuItem(**data)
    _build_children(menu_item, children)
    db.add(menu_item)
    await db.commit()

    logger.info("Menu item %s created: %s", menu_item.id, menu_item.name)
    return await get_menu_item_by_id(db, menu_item.id)


async def update_menu_item(db: AsyncSession, menu_item_id: int, item_in: MenuItemUpdate) -> Optional[MenuItem]:
    menu_item = await get_menu_item_by_id(db, menu_item_id)
    if not menu_item:
        return None

    data = update_fields(item_in, nullable=("sub_category_id", "description", "image", "cooking_time"))
    category_id = data.get("category_id", menu_item.category_id)
    sub_category_id = data.get("sub_category_id", menu_item.sub_category_id)
    # смена категории без новой подкатегории сбрасывает старую
    if "category_id" in data and "sub_category_id" not in data and category_id != menu_item.category_id:
        sub_category_id = None
        data["sub_category_id"] = None
    ingredient_ids = [i["inventory_item_id"] for i in (data.get("ingredients") or [])]
    await _validate_refs(db, category_id, sub_category_id, ingredient_ids)

    children = {key: data.pop(key) for key in ("sizes", "ingredients", "extras") if key in data}
    for key, value in data.items():
        setattr(menu_item, key, value)
    _build_children(menu_item, children)

    await db.commit()
    logger.info("Menu item %s updated: %s", menu_item_id, sorted(list(data) + list(children)))
    return await get_menu_item_by_id(db, menu_item_id)


async def set_menu_item_active(db: AsyncSession, menu_item_id: int, is_active: bool) -> Optional[MenuItem]:
    menu_item = await db.get(MenuItem, menu_item_id)
    if not menu_item:
        return None
    menu_item.is_active = is_active
    await db.commit()
    logger.info("Menu item %s %s", menu_item_id, "activated" if is_active else "deactivated")
    return await get_menu_item_by_id(db, menu_item_id)


async def delete_menu_item(db: AsyncSession, menu_item_id: int) -> bool:
    """
    Удаляет блюдо. Блюдо, которое уже заказывали, удалить нельзя, только деактивировать.
    """
    menu_item = await get_menu_item_by_id(db, menu_item_id)
    if not menu_item:
        return False

    used = await db.execute(select(OrderItem.id).where(OrderItem.menu_item_id == menu_item_id).limit(1))
    if used.first():
        logger.warning("Refusing to delete menu item %s: it has orders", menu_item_id)
        raise ValueError("Menu item has orders, deactivate it instead")

    await db.delete(menu_item)
    await db.commit()
    logger.info("Menu item %s deleted", menu_item_id)
    return True
