"""
Отчёты. Итоги считаются по всей отфильтрованной выборке, не по странице.
Диапазон дат включительный: с начала date_from до конца date_to.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import select, cast, desc, distinct, func, String
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from restaurant_admin.config import settings
from restaurant_admin.crud.common import apply_where, build_page, day_bounds, page_slice
from restaurant_admin.crud.expense import expense_search_clause
from restaurant_admin.crud.purchase import purchase_search_clause
from restaurant_admin.crud.supplier import bill_totals, count_suppliers, get_bills
from restaurant_admin.models import Category, Expense, MenuItem, Order, OrderItem, OrderStatusEnum, Purchase
from restaurant_admin.schemas.order import order_subtotal
from restaurant_admin.schemas.supplier import BillRead

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0")

SALE_STATUSES = (OrderStatusEnum.ready, OrderStatusEnum.served)


def _date_range(column, date_from: Optional[date], date_to: Optional[date]):
    return (
        column >= date_from if date_from else None,
        column <= date_to if date_to else None,
    )


def sales_row(order, cost_ratio: Decimal) -> dict:
    subtotal = order_subtotal(order)
    tax = Decimal(order.tax or 0)
    discount = Decimal(order.discount or 0)
    amount = subtotal + tax - discount
    cost = (subtotal * cost_ratio).quantize(CENT)
    return {
        "id": order.id,
        "date": order.created_at,
        "type": order.order_type,
        "status": order.status,
        "amount": amount.quantize(CENT),
        "tax": tax.quantize(CENT),
        "cost": cost,
        "discount": discount.quantize(CENT),
        "profit": (amount - cost - discount - tax).quantize(CENT),
    }


async def sales_report(
    db: AsyncSession,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    page: int = 1,
    page_size: int = 10,
) -> dict:
    """
    Продажи: заказы в статусе Ready или Served.
    Себестоимость: доля SALES_COST_RATIO от суммы позиций.
    """
    start, end = day_bounds(date_from, date_to)
    stmt = (
        select(Order)
        .options(selectinload(Order.items))
        .where(Order.status.in_(SALE_STATUSES))
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    stmt = apply_where(
        stmt,
        cast(Order.id, String).icontains(search, autoescape=True) if search else None,
        Order.created_at >= start if start else None,
        Order.created_at <= end if end else None,
    )
    orders = (await db.execute(stmt)).scalars().unique().all()

    rows = [sales_row(o, settings.SALES_COST_RATIO) for o in orders]
    totals = {
        "total_sale": sum((r["amount"] for r in rows), ZERO),
        "total_cost": sum((r["cost"] for r in rows), ZERO),
        "total_discount": sum((r["discount"] for r in rows), ZERO),
        "total_tax": sum((r["tax"] for r in rows), ZERO),
        "total_profit": sum((r["profit"] for r in rows), ZERO),
    }
    logger.debug("Sales report: %d orders, total=%s", len(rows), totals["total_sale"])
    return {**build_page(page_slice(rows, page, page_size), len(rows), page, page_size), "totals": totals}


async def purchase_report(
    db: AsyncSession,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    page: int = 1,
    page_size: int = 10,
) -> dict:
    stmt = (
        select(Purchase)
        .options(selectinload(Purchase.items), selectinload(Purchase.supplier))
        .order_by(Purchase.purchase_date.desc(), Purchase.id.desc())
    )
    stmt = apply_where(stmt, purchase_search_clause(search), *_date_range(Purchase.purchase_date, date_from, date_to))
    purchases = (await db.execute(stmt)).scalars().unique().all()

    rows = [
        {
            "id": p.id,
            "invoice_no": p.invoice_no,
            "supplier": p.supplier.name,
            "purchase_date": p.purchase_date,
            "item_name": p.items[0].name if p.items else "N/A",
            "amount": Decimal(p.total_amount).quantize(CENT),
            "paid_amount": Decimal(p.paid_amount).quantize(CENT),
            "due_amount": Decimal(p.due_amount).quantize(CENT),
        }
        for p in purchases
    ]
    return {
        **build_page(page_slice(rows, page, page_size), len(rows), page, page_size),
        "totals": bill_totals(purchases),
    }


async def expense_report(
    db: AsyncSession,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    page: int = 1,
    page_size: int = 10,
) -> dict:
    """
    Расходы. Сумма: количество * цена без учёта скидки, долг = сумма - оплачено.
    """
    stmt = (
        select(Expense)
        .options(selectinload(Expense.expense_type))
        .order_by(Expense.date.desc(), Expense.id.desc())
    )
    stmt = apply_where(stmt, expense_search_clause(search), *_date_range(Expense.date, date_from, date_to))
    expenses = (await db.execute(stmt)).scalars().unique().all()

    rows = [
        {
            "id": e.id,
            "expense_no": e.expense_no,
            "expense_type": e.expense_type.name,
            "date": e.date,
            "name": e.name,
            "supplier": e.supplier,
            "quantity": e.quantity,
            "unit_price": e.unit_price,
            "total_discount": e.total_discount,
            "paid_amount": e.paid_amount,
        }
        for e in expenses
    ]
    total_amount = sum((Decimal(e.quantity) * Decimal(e.unit_price) for e in expenses), ZERO).quantize(CENT)
    total_paid = sum((Decimal(e.paid_amount or 0) for e in expenses), ZERO).quantize(CENT)
    totals = {"total_amount": total_amount, "total_paid": total_paid, "total_due": total_amount - total_paid}
    return {**build_page(page_slice(rows, page, page_size), len(rows), page, page_size), "totals": totals}


async def supplier_report(
    db: AsyncSession,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    page: int = 1,
    page_size: int = 10,
) -> dict:
    """Счета поставщиков за период. total_suppliers: по всем поставщикам."""
    bills = await get_bills(db, search=search, date_from=date_from, date_to=date_to)
    totals = {**bill_totals(bills), "total_suppliers": await count_suppliers(db)}
    items = [BillRead.from_purchase(b) for b in page_slice(bills, page, page_size)]
    return {**build_page(items, len(bills), page, page_size), "totals": totals}


def _sold_items(date_from: Optional[date], date_to: Optional[date]):
    """Условия для проданных позиций: заказ Ready или Served в пределах дат."""
    start, end = day_bounds(date_from, date_to)
    return (
        Order.status.in_(SALE_STATUSES),
        Order.created_at >= start if start else None,
        Order.created_at <= end if end else None,
    )


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENT)


async def top_selling_report(
    db: AsyncSession,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    page: int = 1,
    page_size: int = 10,
) -> dict:
    """
    Самые продаваемые блюда: количество и выручка по позициям проданных заказов.
    Сортировка по количеству, при равенстве по выручке.
    """
    quantity = func.sum(OrderItem.quantity).label("quantity")
    revenue = func.sum(OrderItem.price * OrderItem.quantity).label("revenue")
    stmt = (
        select(OrderItem.menu_item_id, OrderItem.name, MenuItem.image, quantity, revenue)
        .join(Order, Order.id == OrderItem.order_id)
        .outerjoin(MenuItem, MenuItem.id == OrderItem.menu_item_id)
        .group_by(OrderItem.menu_item_id, OrderItem.name, MenuItem.image)
        .order_by(desc("quantity"), desc("revenue"), OrderItem.name)
    )
    stmt = apply_where(
        stmt,
        OrderItem.name.icontains(search, autoescape=True) if search else None,
        *_sold_items(date_from, date_to),
    )
    result = (await db.execute(stmt)).all()

    rows = [
        {
            "menu_item_id": row.menu_item_id,
            "name": row.name,
            "image": row.image,
            "quantity": int(row.quantity or 0),
            "revenue": _money(row.revenue),
        }
        for row in result
    ]
    totals = {
        "total_quantity": sum(r["quantity"] for r in rows),
        "total_revenue": sum((r["revenue"] for r in rows), ZERO),
    }
    return {**build_page(page_slice(rows, page, page_size), len(rows), page, page_size), "totals": totals}


async def sales_by_category_report(
    db: AsyncSession,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    page: int = 1,
    page_size: int = 10,
) -> dict:
    """
    Продажи по категориям меню: выручка, число заказов и доля в общей выручке (%).
    Доля считается от выручки всех категорий после фильтров.
    """
    revenue = func.sum(OrderItem.price * OrderItem.quantity).label("revenue")
    orders = func.count(distinct(OrderItem.order_id)).label("orders")
    stmt = (
        select(Category.id, Category.name, revenue, orders)
        .select_from(OrderItem)
        .join(Order, Order.id == OrderItem.order_id)
        .join(MenuItem, MenuItem.id == OrderItem.menu_item_id)
        .join(Category, Category.id == MenuItem.category_id)
        .group_by(Category.id, Category.name)
        .order_by(desc("revenue"), Category.name)
    )
    stmt = apply_where(
        stmt,
        Category.name.icontains(search, autoescape=True) if search else None,
        *_sold_items(date_from, date_to),
    )
    result = (await db.execute(stmt)).all()

    total_revenue = sum((_money(row.revenue) for row in result), ZERO)
    rows = [
        {
            "category_id": row.id,
            "category": row.name,
            "revenue": _money(row.revenue),
            "orders": int(row.orders or 0),
            "percentage": (
                (_money(row.revenue) * 100 / total_revenue).quantize(CENT) if total_revenue else ZERO
            ),
        }
        for row in result
    ]
    totals = {"total_revenue": total_revenue, "total_orders": sum(r["orders"] for r in rows)}
    return {**build_page(page_slice(rows, page, page_size), len(rows), page, page_size), "totals": totals}
