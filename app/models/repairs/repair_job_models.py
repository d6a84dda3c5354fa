from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, Enum, Index
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin
from app.models.enums.repair_job_status import RepairJobStatus


class RepairJob(Base, TimestampMixin):
    __tablename__ = "repair_jobs"

    id = Column(Integer, primary_key=True)
    job_number = Column(Integer, nullable=False, unique=True, index=True)
    customer_name = Column(String(255), nullable=True)
    customer_phone = Column(String(50), nullable=True)
    device_type = Column(String(100), nullable=False)
    device_model = Column(String(100), nullable=True)
    issue_description = Column(Text, nullable=False)
    status = Column(Enum(RepairJobStatus, name="repair_job_status"), nullable=False, default=RepairJobStatus.PENDING, index=True)
    estimated_cost = Column(Numeric(10, 2), nullable=True)
    actual_cost = Column(Numeric(10, 2), nullable=True)
    completion_date = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    job_items = relationship("JobItem", back_populates="job", passive_deletes=True)

    __table_args__ = (Index("ix_repair_jobs_status_created", "status", "created_at"),)

    def __repr__(self):
        return f"<RepairJob id={self.id} number={self.job_number} status={self.status}>"
