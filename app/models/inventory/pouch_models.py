from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin

AUTO_POUCH_LABEL = "Auto-assigned Pouch"


class Pouch(Base, TimestampMixin):
    """Physical storage container. Capacity is a policy value, not a schema constraint."""

    __tablename__ = "pouches"

    id = Column(Integer, primary_key=True)
    pouch_number = Column(Integer, nullable=False, unique=True, index=True)
    label = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)  # shelf / row

    items = relationship("InventoryItem", back_populates="pouch", passive_deletes=True)

    def __repr__(self):
        return f"<Pouch id={self.id} number={self.pouch_number} label={self.label}>"
