"""
Справочник прав доступа. Роль хранит только коды включённых прав.
"""
from typing import Dict, List

PERMISSION_CATALOGUE: List[dict] = [
    {
        "category": "Menu",
        "code": "menu.manage",
        "name": "Menu Management",
        "children": [
            {"code": "menu.create", "name": "Create Menu"},
            {"code": "menu.edit", "name": "Edit Menu"},
            {"code": "menu.deactivate", "name": "Deactivate Menu"},
        ],
    },
    {
        "category": "Menu",
        "code": "category.manage",
        "name": "Category Management",
        "children": [
            {"code": "category.create", "name": "Create Category"},
            {"code": "category.edit", "name": "Edit Category"},
        ],
    },
    {
        "category": "Orders",
        "code": "order.manage",
        "name": "Order Management",
        "children": [
            {"code": "order.create", "name": "Create Order"},
            {"code": "order.status", "name": "Change Order Status"},
            {"code": "order.delete", "name": "Delete Order"},
        ],
    },
    {
        "category": "Orders",
        "code": "kitchen.view",
        "name": "Kitchen Display",
        "children": [
            {"code": "kitchen.progress", "name": "Advance Item Status"},
        ],
    },
    {
        "category": "Stock",
        "code": "inventory.manage",
        "name": "Inventory Management",
        "children": [
            {"code": "inventory.create", "name": "Create Ingredient"},
            {"code": "inventory.edit", "name": "Edit Ingredient"},
        ],
    },
    {
        "category": "Stock",
        "code": "purchase.manage",
        "name": "Purchase Management",
        "children": [
            {"code": "purchase.create", "name": "Create Purchase"},
            {"code": "purchase.edit", "name": "Edit Purchase"},
        ],
    },
    {
        "category": "Finance",
        "code": "expense.manage",
        "name": "Expense Management",
        "children": [
            {"code": "expense.create", "name": "Create Expense"},
            {"code": "expense.type", "name": "Manage Expense Types"},
        ],
    },
    {
        "category": "Finance",
        "code": "supplier.manage",
        "name": "Supplier Management",
        "children": [
            {"code": "supplier.create", "name": "Create Supplier"},
            {"code": "supplier.payment", "name": "Pay Supplier Bills"},
        ],
    },
    {
        "category": "Finance",
        "code": "report.view",
        "name": "Reports",
        "children": [],
    },
    {
        "category": "Administration",
        "code": "table.manage",
        "name": "Table Management",
        "children": [],
    },
    {
        "category": "Administration",
        "code": "role.manage",
        "name": "User Roles",
        "children": [],
    },
]


def all_codes() -> set:
    codes = set()
    for perm in PERMISSION_CATALOGUE:
        codes.add(perm["code"])
        codes.update(child["code"] for child in perm["children"])
    return codes


def grouped_permissions(enabled: set) -> Dict[str, List[dict]]:
    """Справочник, сгруппированный по категориям, с флагом is_enabled у каждого узла."""
    groups: Dict[str, List[dict]] = {}
    for perm in PERMISSION_CATALOGUE:
        groups.setdefault(perm["category"], []).append(
            {
                "code": perm["code"],
                "name": perm["name"],
                "is_enabled": perm["code"] in enabled,
                "children": [
                    {"code": c["code"], "name": c["name"], "is_enabled": c["code"] in enabled}
                    for c in perm["children"]
                ],
            }
        )
    return groups
