from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.models.inventory.inventory_item_models import InventoryItem
from app.models.inventory.category_models import Category
from app.models.repairs.repair_job_models import RepairJob
from app.models.enums.repair_job_status import ACTIVE_JOB_STATUSES
from app.schemas.dashboard.dashboard_schemas import DashboardOut, DashboardStats
from app.services.inventory.inventory_item_service import map_item

DASHBOARD_LIST_SIZE = 5


async def get_dashboard(db: AsyncSession) -> DashboardOut:
    active = InventoryItem.is_active.is_(True)
    low = InventoryItem.current_stock <= InventoryItem.min_stock_level

    total_items = await db.scalar(select(func.count(InventoryItem.id)).where(active))
    low_stock_count = await db.scalar(select(func.count(InventoryItem.id)).where(active, low))
    active_repairs = await db.scalar(
        select(func.count(RepairJob.id)).where(RepairJob.status.in_(ACTIVE_JOB_STATUSES))
    )
    categories_count = await db.scalar(select(func.count(Category.id)))

    recent = await db.scalars(
        select(InventoryItem)
        .where(active)
        .order_by(InventoryItem.created_at.desc(), InventoryItem.id.desc())
        .limit(DASHBOARD_LIST_SIZE)
    )
    low_stock = await db.scalars(
        select(InventoryItem)
        .where(active, low)
        .order_by(InventoryItem.current_stock.asc(), InventoryItem.id.asc())
        .limit(DASHBOARD_LIST_SIZE)
    )

    return DashboardOut(
        stats=DashboardStats(
            total_items=total_items or 0,
            low_stock_items=low_stock_count or 0,
            active_repairs=active_repairs or 0,
            categories_count=categories_count or 0,
        ),
        recent_items=[map_item(i) for i in recent.all()],
        low_stock=[map_item(i) for i in low_stock.all()],
    )
