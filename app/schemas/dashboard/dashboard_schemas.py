from pydantic import BaseModel
from typing import List

from app.schemas.inventory.inventory_item_schemas import InventoryItemOut


class DashboardStats(BaseModel):
    total_items: int
    low_stock_items: int
    active_repairs: int
    categories_count: int


class DashboardOut(BaseModel):
    stats: DashboardStats
    recent_items: List[InventoryItemOut]
    low_stock: List[InventoryItemOut]
