import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from restaurant_admin.crud.common import paginate, update_fields
from restaurant_admin.models import Purchase, PurchaseItem, Supplier
from restaurant_admin.schemas.purchase import PurchaseCreate, PurchaseUpdate

logger = logging.getLogger(__name__)

INVOICE_PREFIX = "INV-"


def _with_relations(stmt):
    return stmt.options(selectinload(Purchase.items), selectinload(Purchase.supplier))


def purchase_search_clause(term: Optional[str]):
    """Поиск по номеру накладной, поставщику и названиям позиций."""
    if not term:
        return None
    return or_(
        Purchase.invoice_no.icontains(term, autoescape=True),
        Purchase.supplier.has(Supplier.name.icontains(term, autoescape=True)),
        Purchase.items.any(PurchaseItem.name.icontains(term, autoescape=True)),
    )


async def get_purchases(
    db: AsyncSession,
    search: Optional[str] = None,
    ingredient: Optional[str] = None,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[Purchase], int]:
    """
    Список закупок, новые первыми.
    ingredient: точное совпадение названия позиции без учёта регистра.
    """
    stmt = _with_relations(select(Purchase)).order_by(Purchase.purchase_date.desc(), Purchase.id.desc())

    clause = purchase_search_clause(search)
    if clause is not None:
        stmt = stmt.where(clause)
    if ingredient and ingredient.lower() != "all":
        stmt = stmt.where(Purchase.items.any(func.lower(PurchaseItem.name) == ingredient.lower()))

    return await paginate(db, stmt, page, page_size)


async def get_purchase_by_id(db: AsyncSession, purchase_id: int) -> Optional[Purchase]:
    stmt = (
        _with_relations(select(Purchase))
        .where(Purchase.id == purchase_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_ingredient_names(db: AsyncSession) -> List[str]:
    """Уникальные названия закупаемых позиций по алфавиту."""
    result = await db.execute(select(PurchaseItem.name).distinct().order_by(PurchaseItem.name))
    return list(result.scalars().all())


async def _check_supplier(db: AsyncSession, supplier_id: int) -> None:
    if not await db.get(Supplier, supplier_id):
        raise ValueError(f"Supplier with id={supplier_id} not found")


async def _ensure_unique_invoice(db: AsyncSession, invoice_no: str, exclude_id: Optional[int] = None) -> None:
    stmt = select(Purchase.id).where(Purchase.invoice_no == invoice_no)
    if exclude_id is not None:
        stmt = stmt.where(Purchase.id != exclude_id)
    if (await db.execute(stmt)).first():
        raise ValueError(f"Invoice '{invoice_no}' already exists")


def _check_totals(purchase: Purchase) -> None:
    if purchase.total_amount < 0:
        raise ValueError("Discount exceeds purchase total")
    if Decimal(purchase.paid_amount or 0) > purchase.total_amount:
        raise ValueError("Paid amount exceeds purchase total")


async def create_purchase(db: AsyncSession, purchase_in: PurchaseCreate) -> Purchase:
    """
    Создаёт закупку с позициями.
    Без номера накладной присваивается INV-<id с нулями до 5 знаков>.
    """
    data = purchase_in.model_dump()
    await _check_supplier(db, data["supplier_id"])
    if data["invoice_no"]:
        await _ensure_unique_invoice(db, data["invoice_no"])

    items = data.pop("items")
    purchase = Purchase(**data)
    purchase.items = [PurchaseItem(**i) for i in items]
    _check_totals(purchase)

    db.add(purchase)
    await db.flush()
    if not purchase.invoice_no:
        purchase.invoice_no = f"{INVOICE_PREFIX}{purchase.id:05d}"
    await db.commit()

    logger.info("Purchase %s created (%s), total=%s", purchase.id, purchase.invoice_no, purchase.total_amount)
    return await get_purchase_by_id(db, purchase.id)


async def update_purchase(db: AsyncSession, purchase_id: int, purchase_in: PurchaseUpdate) -> Optional[Purchase]:
    purchase = await get_purchase_by_id(db, purchase_id)
    if not purchase:
        return None

    data = update_fields(purchase_in)
    if data.get("supplier_id") is not None:
        await _check_supplier(db, data["supplier_id"])
    if data.get("invoice_no"):
        await _ensure_unique_invoice(db, data["invoice_no"], exclude_id=purchase_id)

    items = data.pop("items", None)
    for key, value in data.items():
        setattr(purchase, key, value)
    if items is not None:
        purchase.items = [PurchaseItem(**i) for i in items]
    _check_totals(purchase)

    await db.commit()
    logger.info("Purchase %s updated: %s", purchase_id, sorted(list(data) + (["items"] if items is not None else [])))
    return await get_purchase_by_id(db, purchase_id)


async def delete_purchase(db: AsyncSession, purchase_id: int) -> bool:
    purchase = await get_purchase_by_id(db, purchase_id)
    if not purchase:
        return False
    await db.delete(purchase)
    await db.commit()
    logger.info("Purchase %s deleted", purchase_id)
    return True
