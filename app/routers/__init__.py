# app/routers/__init__.py

from .inventory.category_router import router as category_router
from .inventory.pouch_router import router as pouch_router
from .inventory.inventory_item_router import router as inventory_item_router
from .inventory.stock_movement_router import router as stock_movement_router

from .repairs.repair_job_router import router as repair_job_router

from .dashboard.dashboard_router import router as dashboard_router


__all__ = [
"category_router",
"pouch_router",
"inventory_item_router",
"stock_movement_router",

"repair_job_router",

"dashboard_router",
]
