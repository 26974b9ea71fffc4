"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17 10:00:00

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

# В enum хранятся имена членов (receive, dine_in, ML -> ml)
order_status = postgresql.ENUM("receive", "preparing", "ready", "served", name="order_status", create_type=False)
order_type = postgresql.ENUM("dine_in", "takeaway", "delivery", name="order_type", create_type=False)
purchase_unit = postgresql.ENUM("kg", "gm", "piece", "ml", name="purchase_unit", create_type=False)

# Таблицы с индексом по id (index=True в моделях)
INDEXED_TABLES = (
    "roles",
    "users",
    "categories",
    "sub_categories",
    "inventory_items",
    "menu_items",
    "dining_tables",
    "orders",
    "order_items",
    "suppliers",
    "purchases",
    "expense_types",
    "expenses",
    "business_days",
)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    for enum_type in (order_status, order_type, purchase_unit):
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        "roles",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(50), nullable=False, unique=True),
        *_timestamps(),
    )
    op.create_table(
        "role_permissions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("role_id", sa.Integer, sa.ForeignKey("roles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("code", sa.String(64), nullable=False),
        sa.UniqueConstraint("role_id", "code", name="uq_role_permission"),
    )
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("email", sa.String(128), nullable=True),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("country_code", sa.String(8), nullable=True),
        sa.Column("avatar", sa.String(512), nullable=True),
        sa.Column("role_id", sa.Integer, sa.ForeignKey("roles.id"), nullable=True),
        sa.Column("password_hash", sa.String(256), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(64), nullable=False, unique=True),
        sa.Column("number", sa.String(32), nullable=False),
        sa.Column("image", sa.String(512), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_table(
        "sub_categories",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("category_id", sa.Integer, sa.ForeignKey("categories.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("number", sa.String(32), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_table(
        "inventory_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(64), nullable=False, unique=True),
        sa.Column("unit", sa.String(16), nullable=False, server_default="kg"),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False, server_default="0"),
        sa.Column("low_threshold", sa.Numeric(12, 3), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "menu_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("category_id", sa.Integer, sa.ForeignKey("categories.id"), nullable=False),
        sa.Column("sub_category_id", sa.Integer, sa.ForeignKey("sub_categories.id"), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image", sa.String(512), nullable=True),
        sa.Column("cooking_time", sa.String(32), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_table(
        "menu_item_sizes",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("menu_item_id", sa.Integer, sa.ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False),
        sa.Column("size", sa.String(32), nullable=False),
        sa.Column("regular_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("offer_price", sa.Numeric(10, 2), nullable=True),
    )
    op.create_table(
        "menu_item_ingredients",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("menu_item_id", sa.Integer, sa.ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False),
        sa.Column("inventory_item_id", sa.Integer, sa.ForeignKey("inventory_items.id"), nullable=False),
        sa.Column("consumption_qty", sa.Numeric(12, 3), nullable=False),
    )
    op.create_table(
        "menu_item_extras",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("menu_item_id", sa.Integer, sa.ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
    )

    op.create_table(
        "dining_tables",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("table_no", sa.String(16), nullable=False, unique=True),
        sa.Column("capacity", sa.Integer, nullable=False, server_default="2"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("table_id", sa.Integer, sa.ForeignKey("dining_tables.id"), nullable=True),
        sa.Column("order_type", order_type, nullable=False, server_default="dine_in"),
        sa.Column("status", order_status, nullable=False, server_default="receive"),
        sa.Column("tax", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("discount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("order_id", sa.Integer, sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("menu_item_id", sa.Integer, sa.ForeignKey("menu_items.id"), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", order_status, nullable=False, server_default="receive"),
    )

    op.create_table(
        "suppliers",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("number", sa.String(32), nullable=False),
        sa.Column("email", sa.String(128), nullable=False),
        sa.Column("address", sa.String(256), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "purchases",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("invoice_no", sa.String(32), nullable=True, unique=True),
        sa.Column("supplier_id", sa.Integer, sa.ForeignKey("suppliers.id"), nullable=False),
        sa.Column("payment_type", sa.String(32), nullable=False),
        sa.Column("purchase_date", sa.Date, nullable=False),
        sa.Column("vat", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("discount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("paid_amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_table(
        "purchase_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("purchase_id", sa.Integer, sa.ForeignKey("purchases.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False),
        sa.Column("unit", purchase_unit, nullable=False, server_default="kg"),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
    )

    op.create_table(
        "expense_types",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(64), nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("expense_no", sa.String(32), nullable=True, unique=True),
        sa.Column("expense_type_id", sa.Integer, sa.ForeignKey("expense_types.id"), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("supplier", sa.String(128), nullable=True),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_discount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("paid_amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("date", sa.Date, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "business_days",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("opened_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
    )

    for table in INDEXED_TABLES:
        op.create_index(op.f(f"ix_{table}_id"), table, ["id"], unique=False)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_users_username"), table_name="users")
    for table in INDEXED_TABLES:
        op.drop_index(op.f(f"ix_{table}_id"), table_name=table)

    for table in (
        "business_days",
        "expenses",
        "expense_types",
        "purchase_items",
        "purchases",
        "suppliers",
        "order_items",
        "orders",
        "dining_tables",
        "menu_item_extras",
        "menu_item_ingredients",
        "menu_item_sizes",
        "menu_items",
        "inventory_items",
        "sub_categories",
        "categories",
        "users",
        "role_permissions",
        "roles",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_type in (purchase_unit, order_type, order_status):
        enum_type.drop(bind, checkfirst=True)
