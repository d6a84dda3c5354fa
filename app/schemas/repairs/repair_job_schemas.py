# app/schemas/repairs/repair_job_schemas.py

from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal
from datetime import datetime

from app.models.enums.repair_job_status import RepairJobStatus


class RepairJobCreate(BaseModel):
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = Field(default=None, max_length=50)
    device_type: str
    device_model: Optional[str] = None
    issue_description: str
    status: RepairJobStatus = RepairJobStatus.PENDING
    estimated_cost: Optional[Decimal] = Field(default=None, ge=0)
    actual_cost: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None


class RepairJobUpdate(BaseModel):
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = Field(default=None, max_length=50)
    device_type: Optional[str] = None
    device_model: Optional[str] = None
    issue_description: Optional[str] = None
    status: Optional[RepairJobStatus] = None
    estimated_cost: Optional[Decimal] = Field(default=None, ge=0)
    actual_cost: Optional[Decimal] = Field(default=None, ge=0)
    completion_date: Optional[datetime] = None
    notes: Optional[str] = None


class RepairJobOut(BaseModel):
    id: int
    job_number: int
    customer_name: Optional[str]
    customer_phone: Optional[str]
    device_type: str
    device_model: Optional[str]
    issue_description: str
    status: RepairJobStatus
    estimated_cost: Optional[Decimal]
    actual_cost: Optional[Decimal]
    completion_date: Optional[datetime]
    notes: Optional[str]

    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class RepairJobListData(BaseModel):
    total: int
    items: List[RepairJobOut]
