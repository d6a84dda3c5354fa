from sqlalchemy import Column, Integer, String, Text, Index, func
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin

DEFAULT_CATEGORY_COLOR = "#3B82F6"


class Category(Base, TimestampMixin):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(50), nullable=True)  # lucide icon name rendered by the UI
    color = Column(String(7), nullable=False, default=DEFAULT_CATEGORY_COLOR)

    items = relationship("InventoryItem", back_populates="category", passive_deletes=True)

    __table_args__ = (
        Index("ux_categories_name_lower", func.lower(name), unique=True),
    )

    def __repr__(self):
        return f"<Category id={self.id} name={self.name}>"
