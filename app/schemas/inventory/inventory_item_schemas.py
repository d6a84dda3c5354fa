# app/schemas/inventory/inventory_item_schemas.py

from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal
from datetime import datetime
from enum import Enum

from app.core.config import LOW_STOCK_DEFAULT_LEVEL


class StockState(str, Enum):
    all = "all"
    low = "low"
    out = "out"


class StockStatus(str, Enum):
    in_stock = "in_stock"
    low_stock = "low_stock"
    out_of_stock = "out_of_stock"


class InventoryItemCreate(BaseModel):
    name: str
    description: Optional[str] = None
    category_id: Optional[int] = None
    pouch_id: Optional[int] = None
    sku: Optional[str] = Field(default=None, max_length=100)
    current_stock: int = Field(default=0, ge=0)
    min_stock_level: int = Field(default=LOW_STOCK_DEFAULT_LEVEL, ge=0)
    purchase_price: Optional[Decimal] = Field(default=None, ge=0)
    selling_price: Optional[Decimal] = Field(default=None, ge=0)
    supplier: Optional[str] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None


class InventoryItemUpdate(BaseModel):
    """Stock is not editable here; it only moves through the ledger."""

    name: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    pouch_id: Optional[int] = None
    sku: Optional[str] = Field(default=None, max_length=100)
    min_stock_level: Optional[int] = Field(default=None, ge=0)
    purchase_price: Optional[Decimal] = Field(default=None, ge=0)
    selling_price: Optional[Decimal] = Field(default=None, ge=0)
    supplier: Optional[str] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None


class InventoryItemOut(BaseModel):
    id: int
    name: str
    description: Optional[str]
    sku: Optional[str]

    category_id: Optional[int]
    category_name: Optional[str]
    category_color: Optional[str]

    pouch_id: Optional[int]
    pouch_number: Optional[int]

    current_stock: int
    min_stock_level: int
    stock_status: StockStatus

    purchase_price: Optional[Decimal]
    selling_price: Optional[Decimal]
    supplier: Optional[str]
    notes: Optional[str]
    image_url: Optional[str]

    is_active: bool

    created_at: datetime
    updated_at: Optional[datetime]


class InventoryItemListData(BaseModel):
    total: int
    items: List[InventoryItemOut]
