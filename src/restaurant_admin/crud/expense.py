import logging
from typing import List, Optional, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from restaurant_admin.crud.common import active_clause, apply_where, paginate, search_clause, update_fields
from restaurant_admin.models import Expense, ExpenseType
from restaurant_admin.schemas.common import ActiveFilter
from restaurant_admin.schemas.expense import ExpenseCreate, ExpenseTypeCreate, ExpenseTypeUpdate, ExpenseUpdate

logger = logging.getLogger(__name__)

EXPENSE_PREFIX = "EXP-"


# --- Типы расходов ---

async def get_expense_types(
    db: AsyncSession,
    search: Optional[str] = None,
    status: Optional[ActiveFilter] = None,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[ExpenseType], int]:
    stmt = select(ExpenseType).order_by(ExpenseType.id)
    stmt = apply_where(stmt, search_clause(search, ExpenseType.name), active_clause(ExpenseType.is_active, status))
    return await paginate(db, stmt, page, page_size)


async def _ensure_unique_type(db: AsyncSession, name: str, exclude_id: Optional[int] = None) -> None:
    stmt = select(ExpenseType.id).where(func.lower(ExpenseType.name) == name.lower())
    if exclude_id is not None:
        stmt = stmt.where(ExpenseType.id != exclude_id)
    if (await db.execute(stmt)).first():
        raise ValueError(f"Expense type '{name}' already exists")


async def create_expense_type(db: AsyncSession, type_in: ExpenseTypeCreate) -> ExpenseType:
    await _ensure_unique_type(db, type_in.name)
    expense_type = ExpenseType(**type_in.model_dump())
    db.add(expense_type)
    await db.commit()
    await db.refresh(expense_type)
    logger.info("Expense type %s created: %s", expense_type.id, expense_type.name)
    return expense_type


async def update_expense_type(
    db: AsyncSession, type_id: int, type_in: ExpenseTypeUpdate
) -> Optional[ExpenseType]:
    expense_type = await db.get(ExpenseType, type_id)
    if not expense_type:
        return None
    update_data = update_fields(type_in)
    if "name" in update_data:
        await _ensure_unique_type(db, update_data["name"], exclude_id=type_id)
    for key, value in update_data.items():
        setattr(expense_type, key, value)
    await db.commit()
    await db.refresh(expense_type)
    return expense_type


async def set_expense_type_active(db: AsyncSession, type_id: int, is_active: bool) -> Optional[ExpenseType]:
    expense_type = await db.get(ExpenseType, type_id)
    if not expense_type:
        return None
    expense_type.is_active = is_active
    await db.commit()
    await db.refresh(expense_type)
    logger.info("Expense type %s %s", expense_type.name, "activated" if is_active else "deactivated")
    return expense_type


# --- Расходы ---

def expense_search_clause(term: Optional[str]):
    if not term:
        return None
    return or_(
        Expense.expense_no.icontains(term, autoescape=True),
        Expense.name.icontains(term, autoescape=True),
        Expense.expense_type.has(ExpenseType.name.icontains(term, autoescape=True)),
    )


async def get_expenses(
    db: AsyncSession,
    search: Optional[str] = None,
    expense_type: Optional[str] = None,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[Expense], int]:
    """
    Список расходов, новые первыми.
    expense_type: название типа без учёта регистра, "all": без фильтра.
    """
    stmt = (
        select(Expense)
        .options(selectinload(Expense.expense_type))
        .order_by(Expense.date.desc(), Expense.id.desc())
    )
    stmt = apply_where(stmt, expense_search_clause(search))
    if expense_type and expense_type.lower() != "all":
        stmt = stmt.where(Expense.expense_type.has(func.lower(ExpenseType.name) == expense_type.lower()))
    return await paginate(db, stmt, page, page_size)


async def get_expense_by_id(db: AsyncSession, expense_id: int) -> Optional[Expense]:
    stmt = (
        select(Expense)
        .where(Expense.id == expense_id)
        .options(selectinload(Expense.expense_type))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_expense_type_names(db: AsyncSession) -> List[str]:
    """Названия типов, по которым есть расходы, по алфавиту."""
    result = await db.execute(
        select(ExpenseType.name).join(Expense, Expense.expense_type_id == ExpenseType.id).distinct().order_by(
            ExpenseType.name
        )
    )
    return list(result.scalars().all())


async def _check_type(db: AsyncSession, type_id: int) -> None:
    expense_type = await db.get(ExpenseType, type_id)
    if not expense_type:
        raise ValueError(f"Expense type with id={type_id} not found")
    if not expense_type.is_active:
        raise ValueError(f"Expense type '{expense_type.name}' is not active")


async def _ensure_unique_no(db: AsyncSession, expense_no: str) -> None:
    if (await db.execute(select(Expense.id).where(Expense.expense_no == expense_no))).first():
        raise ValueError(f"Expense '{expense_no}' already exists")


async def create_expense(db: AsyncSession, expense_in: ExpenseCreate) -> Expense:
    data = expense_in.model_dump()
    await _check_type(db, data["expense_type_id"])
    if data["expense_no"]:
        await _ensure_unique_no(db, data["expense_no"])

    expense = Expense(**data)
    if expense.total_price < 0:
        raise ValueError("Discount exceeds expense amount")

    db.add(expense)
    await db.flush()
    if not expense.expense_no:
        expense.expense_no = f"{EXPENSE_PREFIX}{expense.id:05d}"
    await db.commit()

    logger.info("Expense %s created (%s), total=%s", expense.id, expense.expense_no, expense.total_price)
    return await get_expense_by_id(db, expense.id)


async def update_expense(db: AsyncSession, expense_id: int, expense_in: ExpenseUpdate) -> Optional[Expense]:
    expense = await db.get(Expense, expense_id)
    if not expense:
        return None

    update_data = update_fields(expense_in, nullable=("supplier",))
    if update_data.get("expense_type_id") is not None and update_data["expense_type_id"] != expense.expense_type_id:
        await _check_type(db, update_data["expense_type_id"])
    for key, value in update_data.items():
        setattr(expense, key, value)
    if expense.total_price < 0:
        raise ValueError("Discount exceeds expense amount")

    await db.commit()
    logger.info("Expense %s updated: %s", expense_id, sorted(update_data))
    return await get_expense_by_id(db, expense_id)


async def delete_expense(db: AsyncSession, expense_id: int) -> bool:
    expense = await db.get(Expense, expense_id)
    if not expense:
        return False
    await db.delete(expense)
    await db.commit()
    logger.info("Expense %s deleted", expense_id)
    return True
