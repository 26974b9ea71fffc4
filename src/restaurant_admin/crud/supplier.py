import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from restaurant_admin.crud.common import apply_where, page_slice, paginate, search_clause, update_fields
from restaurant_admin.crud.purchase import get_purchase_by_id
from restaurant_admin.models import Purchase, Supplier
from restaurant_admin.schemas.supplier import SupplierCreate, SupplierUpdate

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


async def get_suppliers(
    db: AsyncSession,
    search: Optional[str] = None,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[Supplier], int]:
    stmt = select(Supplier).order_by(Supplier.name, Supplier.id)
    stmt = apply_where(stmt, search_clause(search, Supplier.name, Supplier.number, Supplier.email))
    return await paginate(db, stmt, page, page_size)


async def get_supplier_by_id(db: AsyncSession, supplier_id: int) -> Optional[Supplier]:
    return await db.get(Supplier, supplier_id)


async def create_supplier(db: AsyncSession, supplier_in: SupplierCreate) -> Supplier:
    supplier = Supplier(**supplier_in.model_dump())
    db.add(supplier)
    await db.commit()
    await db.refresh(supplier)
    logger.info("Supplier %s created: %s", supplier.id, supplier.name)
    return supplier


async def update_supplier(db: AsyncSession, supplier_id: int, supplier_in: SupplierUpdate) -> Optional[Supplier]:
    supplier = await db.get(Supplier, supplier_id)
    if not supplier:
        return None
    update_data = update_fields(supplier_in, nullable=("address",))
    for key, value in update_data.items():
        setattr(supplier, key, value)
    await db.commit()
    await db.refresh(supplier)
    logger.info("Supplier %s updated: %s", supplier_id, sorted(update_data))
    return supplier


def _bills_stmt(search: Optional[str] = None, supplier_id: Optional[int] = None):
    stmt = (
        select(Purchase)
        .options(selectinload(Purchase.items), selectinload(Purchase.supplier))
        .order_by(Purchase.purchase_date.desc(), Purchase.id.desc())
    )
    if search:
        stmt = stmt.where(
            or_(
                Purchase.invoice_no.icontains(search, autoescape=True),
                Purchase.supplier.has(Supplier.name.icontains(search, autoescape=True)),
            )
        )
    if supplier_id is not None:
        stmt = stmt.where(Purchase.supplier_id == supplier_id)
    return stmt


async def get_bills(
    db: AsyncSession,
    search: Optional[str] = None,
    supplier_id: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> List[Purchase]:
    """Все счета (закупки) по фильтрам, без пагинации."""
    stmt = _bills_stmt(search, supplier_id)
    if date_from:
        stmt = stmt.where(Purchase.purchase_date >= date_from)
    if date_to:
        stmt = stmt.where(Purchase.purchase_date <= date_to)
    result = await db.execute(stmt)
    return list(result.scalars().unique().all())


async def get_due_bills(
    db: AsyncSession,
    search: Optional[str] = None,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[Purchase], int]:
    """
    Неоплаченные счета (due > 0). Остаток считается из позиций,
    поэтому фильтруем после загрузки.
    """
    bills = [b for b in await get_bills(db, search=search) if b.due_amount > 0]
    return page_slice(bills, page, page_size), len(bills)


async def get_supplier_bills(
    db: AsyncSession,
    supplier_id: int,
    search: Optional[str] = None,
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[Purchase], int]:
    return await paginate(db, _bills_stmt(search, supplier_id), page, page_size)


def bill_totals(bills: List[Purchase]) -> dict:
    total_amount = sum((b.total_amount for b in bills), Decimal("0"))
    total_paid = sum((Decimal(b.paid_amount or 0) for b in bills), Decimal("0"))
    return {
        "total_amount": total_amount.quantize(CENT),
        "total_paid": total_paid.quantize(CENT),
        "total_due": (total_amount - total_paid).quantize(CENT),
    }


async def count_suppliers(db: AsyncSession) -> int:
    return (await db.execute(select(func.count(Supplier.id)))).scalar_one()


async def get_supplier_stats(db: AsyncSession) -> dict:
    bills = await get_bills(db)
    totals = bill_totals(bills)
    return {
        "total_suppliers": await count_suppliers(db),
        "total_bills": len(bills),
        "total_purchases": totals["total_amount"],
        **totals,
    }


async def pay_bill(db: AsyncSession, purchase_id: int, amount: Decimal, payment_method: str) -> Optional[Purchase]:
    """
    Оплата по счёту: 0 < amount <= остаток. Способ оплаты запоминается в закупке.
    """
    bill = await get_purchase_by_id(db, purchase_id)
    if not bill:
        return None

    due = bill.due_amount
    if amount <= 0:
        raise ValueError("Payment amount must be positive")
    if amount > due:
        logger.warning("Rejected payment %s on bill %s: due is %s", amount, bill.invoice_no, due)
        raise ValueError(f"Payment exceeds due amount ({due.quantize(CENT)})")

    bill.paid_amount = Decimal(bill.paid_amount or 0) + amount
    bill.payment_type = payment_method
    await db.commit()
    logger.info("Bill %s paid %s via %s", bill.invoice_no, amount, payment_method)

    return await get_purchase_by_id(db, purchase_id)
