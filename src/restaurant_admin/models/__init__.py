from .category import Category, SubCategory
from .menu_item import MenuItem, MenuItemSize, MenuItemIngredient, MenuItemExtra
from .dining_table import DiningTable
from .order import Order, OrderStatusEnum, OrderTypeEnum
from .order_item import OrderItem
from .inventory_item import InventoryItem
from .supplier import Supplier
from .purchase import Purchase, PurchaseItem, PurchaseUnitEnum
from .expense import ExpenseType, Expense
from .user import User, Role, RolePermission
from .business_day import BusinessDay

__all__ = [
    "Category",
    "SubCategory",
    "MenuItem",
    "MenuItemSize",
    "MenuItemIngredient",
    "MenuItemExtra",
    "DiningTable",
    "Order",
    "OrderStatusEnum",
    "OrderTypeEnum",
    "OrderItem",
    "InventoryItem",
    "Supplier",
    "Purchase",
    "PurchaseItem",
    "PurchaseUnitEnum",
    "ExpenseType",
    "Expense",
    "User",
    "Role",
    "RolePermission",
    "BusinessDay",
]
