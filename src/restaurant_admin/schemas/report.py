from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from restaurant_admin.models.order import OrderStatusEnum, OrderTypeEnum
from restaurant_admin.schemas.common import Page
from restaurant_admin.schemas.supplier import BillRead


class SalesReportRow(BaseModel):
    id: int
    date: datetime
    type: OrderTypeEnum
    status: OrderStatusEnum
    amount: Decimal
    tax: Decimal
    cost: Decimal
    discount: Decimal
    profit: Decimal


class SalesTotals(BaseModel):
    total_sale: Decimal
    total_cost: Decimal
    total_discount: Decimal
    total_tax: Decimal
    total_profit: Decimal


class SalesReport(Page[SalesReportRow]):
    totals: SalesTotals


class PurchaseReportRow(BaseModel):
    id: int
    invoice_no: str
    supplier: str
    purchase_date: date
    item_name: str
    amount: Decimal
    paid_amount: Decimal
    due_amount: Decimal


class MoneyTotals(BaseModel):
    total_amount: Decimal
    total_paid: Decimal
    total_due: Decimal


class PurchaseReport(Page[PurchaseReportRow]):
    totals: MoneyTotals


class ExpenseReportRow(BaseModel):
    id: int
    expense_no: str
    expense_type: str
    date: date
    name: str
    supplier: Optional[str] = None
    quantity: Decimal
    unit_price: Decimal
    total_discount: Decimal
    paid_amount: Decimal


class ExpenseReport(Page[ExpenseReportRow]):
    totals: MoneyTotals


class SupplierTotals(MoneyTotals):
    total_suppliers: int


class SupplierReport(Page[BillRead]):
    totals: SupplierTotals


class TopSellingRow(BaseModel):
    menu_item_id: int
    name: str
    image: Optional[str] = None
    quantity: int
    revenue: Decimal


class TopSellingTotals(BaseModel):
    total_quantity: int
    total_revenue: Decimal


class TopSellingReport(Page[TopSellingRow]):
    totals: TopSellingTotals


class CategorySalesRow(BaseModel):
    category_id: int
    category: str
    revenue: Decimal
    orders: int
    percentage: Decimal


class CategorySalesTotals(BaseModel):
    total_revenue: Decimal
    total_orders: int


class CategorySalesReport(Page[CategorySalesRow]):
    totals: CategorySalesTotals
