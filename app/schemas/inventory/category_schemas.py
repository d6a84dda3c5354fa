# app/schemas/inventory/category_schemas.py

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CategoryCreate(BaseModel):
    name: str
    description: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=50)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=50)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)


class CategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str]
    icon: Optional[str]
    color: str
    item_count: int = 0

    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class CategoryListData(BaseModel):
    total: int
    items: List[CategoryOut]
