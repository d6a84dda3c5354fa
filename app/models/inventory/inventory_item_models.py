from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin


class InventoryItem(Base, TimestampMixin):
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    pouch_id = Column(Integer, ForeignKey("pouches.id", ondelete="SET NULL"), nullable=True, index=True)
    sku = Column(String(100), nullable=True, unique=True)
    # Mutated only by the stock ledger
    current_stock = Column(Integer, nullable=False, default=0)
    min_stock_level = Column(Integer, nullable=False, default=5)
    purchase_price = Column(Numeric(10, 2), nullable=True)
    selling_price = Column(Numeric(10, 2), nullable=True)
    supplier = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    category = relationship("Category", back_populates="items", lazy="selectin")
    pouch = relationship("Pouch", back_populates="items", lazy="selectin")

    __table_args__ = (
        Index("ix_inventory_items_active_created", "is_active", "created_at"),
        Index("ix_inventory_items_pouch_active", "pouch_id", "is_active"),
    )

    def __repr__(self):
        return f"<InventoryItem id={self.id} name={self.name} stock={self.current_stock} pouch_id={self.pouch_id}>"
