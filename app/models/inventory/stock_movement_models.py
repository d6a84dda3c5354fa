from sqlalchemy import Column, Integer, String, Text, Enum, ForeignKey, CheckConstraint, Index
from app.core.db import Base
from app.models.base.mixins import CreatedAtMixin
from app.constants.stock_movement_type import StockMovementType


class StockMovement(Base, CreatedAtMixin):
    """
    Append-only ledger row. Never updated or deleted once written; when the
    item itself is deleted the row is kept with item_id cleared.
    """

    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True)
    item_id = Column(Integer, ForeignKey("inventory_items.id", ondelete="SET NULL"), nullable=True, index=True)
    movement_type = Column(Enum(StockMovementType, name="stock_movement_type"), nullable=False)
    # IN/OUT carry a positive quantity, ADJUSTMENT a signed delta
    quantity = Column(Integer, nullable=False)
    reason = Column(String(255), nullable=True)
    reference_id = Column(String(64), nullable=True)  # e.g. repair job id
    notes = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("quantity <> 0", name="ck_stock_movement_quantity_non_zero"),
        Index("ix_stock_movement_item_created", "item_id", "created_at"),
        Index("ix_stock_movement_reference", "reference_id"),
    )

    def __repr__(self):
        return f"<StockMovement id={self.id} item_id={self.item_id} {self.movement_type} qty={self.quantity} ref={self.reference_id}>"
