from sqlalchemy import Column, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import CreatedAtMixin


class JobItem(Base, CreatedAtMixin):
    """Part consumed by a repair job. Creating one is what decrements stock."""

    __tablename__ = "job_items"

    id = Column(Integer, primary_key=True)
    job_id = Column(Integer, ForeignKey("repair_jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("inventory_items.id", ondelete="CASCADE"), nullable=False, index=True)
    quantity_used = Column(Integer, nullable=False)

    job = relationship("RepairJob", back_populates="job_items")
    item = relationship("InventoryItem", lazy="selectin")

    __table_args__ = (
        CheckConstraint("quantity_used > 0", name="ck_job_item_quantity_positive"),
    )

    def __repr__(self):
        return f"<JobItem id={self.id} job_id={self.job_id} item_id={self.item_id} qty={self.quantity_used}>"
