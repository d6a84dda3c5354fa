# app/schemas/repairs/job_item_schemas.py

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class JobItemCreate(BaseModel):
    item_id: int
    quantity_used: int = Field(gt=0)


class JobItemOut(BaseModel):
    id: int
    job_id: int
    item_id: int
    item_name: Optional[str]
    quantity_used: int
    remaining_stock: Optional[int] = None
    movement_id: Optional[int] = None
    created_at: datetime


class JobItemListData(BaseModel):
    total: int
    items: List[JobItemOut]
