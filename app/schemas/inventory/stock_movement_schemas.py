# app/schemas/inventory/stock_movement_schemas.py

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from app.constants.stock_movement_type import StockMovementType


class StockMovementOut(BaseModel):
    id: int
    item_id: Optional[int]
    movement_type: StockMovementType
    quantity: int
    reason: Optional[str]
    reference_id: Optional[str]
    notes: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class StockMovementListData(BaseModel):
    total: int
    items: List[StockMovementOut]


class StockAuditOut(BaseModel):
    item_id: int
    current_stock: int
    ledger_stock: int
    in_sync: bool
