from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..db.base import Base, utcnow


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    sub_category_id = Column(Integer, ForeignKey("sub_categories.id"), nullable=True)
    description = Column(Text, nullable=True)
    image = Column(String(512), nullable=True)
    cooking_time = Column(String(32), nullable=True)  # "20 min"
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # связи
    category = relationship("Category", back_populates="menu_items")
    sub_category = relationship("SubCategory")
    sizes = relationship(
        "MenuItemSize", back_populates="menu_item", cascade="all, delete-orphan", order_by="MenuItemSize.id"
    )
    ingredients = relationship("MenuItemIngredient", back_populates="menu_item", cascade="all, delete-orphan")
    extras = relationship("MenuItemExtra", back_populates="menu_item", cascade="all, delete-orphan")
    order_items = relationship("OrderItem", back_populates="menu_item", passive_deletes=True)


class MenuItemSize(Base):
    __tablename__ = "menu_item_sizes"

    id = Column(Integer, primary_key=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False)
    size = Column(String(32), nullable=False)
    regular_price = Column(Numeric(10, 2), nullable=False)
    offer_price = Column(Numeric(10, 2), nullable=True)

    menu_item = relationship("MenuItem", back_populates="sizes")


class MenuItemIngredient(Base):
    __tablename__ = "menu_item_ingredients"

    id = Column(Integer, primary_key=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False)
    inventory_item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False)
    consumption_qty = Column(Numeric(12, 3), nullable=False)  # расход на одну порцию

    menu_item = relationship("MenuItem", back_populates="ingredients")
    inventory_item = relationship("InventoryItem")


class MenuItemExtra(Base):
    __tablename__ = "menu_item_extras"

    id = Column(Integer, primary_key=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(64), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    menu_item = relationship("MenuItem", back_populates="extras")
