# app/schemas/inventory/pouch_schemas.py

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class PouchCreate(BaseModel):
    label: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None
    location: Optional[str] = Field(default=None, max_length=255)


class PouchUpdate(BaseModel):
    label: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None
    location: Optional[str] = Field(default=None, max_length=255)


class PouchOut(BaseModel):
    id: int
    pouch_number: int
    label: Optional[str]
    description: Optional[str]
    location: Optional[str]

    item_count: int
    capacity: int
    free_slots: int

    created_at: datetime
    updated_at: Optional[datetime]


class PouchItemMini(BaseModel):
    id: int
    name: str
    sku: Optional[str]
    current_stock: int


class PouchDetailOut(PouchOut):
    items: List[PouchItemMini]


class PouchListData(BaseModel):
    total: int
    items: List[PouchOut]
