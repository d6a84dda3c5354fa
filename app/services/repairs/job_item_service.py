# app/services/repairs/job_item_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.exceptions import NotFoundError
from app.core.transactions import run_unit_of_work, exclusive_section
from app.constants.error_codes import ErrorCode
from app.models.repairs.repair_job_models import RepairJob
from app.models.repairs.job_item_models import JobItem
from app.models.inventory.inventory_item_models import InventoryItem
from app.schemas.repairs.job_item_schemas import JobItemCreate, JobItemOut, JobItemListData
from app.services.inventory.stock_ledger_service import record_usage, item_lock_key
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def _ensure_job(db: AsyncSession, job_id: int):
    exists = await db.scalar(select(RepairJob.id).where(RepairJob.id == job_id))
    if not exists:
        raise NotFoundError("Repair job not found", ErrorCode.JOB_NOT_FOUND)


# ---------------- CREATE ----------------
async def create_job_item(
    db: AsyncSession,
    job_id: int,
    payload: JobItemCreate,
) -> JobItemOut:
    """
    Record parts used by a job. The usage row, the stock decrement and the
    OUT movement commit together or not at all.
    """

    async def _work():
        async with exclusive_section(db, item_lock_key(payload.item_id)):
            await _ensure_job(db, job_id)

            # locks and validates the item before anything is written
            movement = await record_usage(
                db,
                item_id=payload.item_id,
                quantity_used=payload.quantity_used,
                job_id=job_id,
            )

            job_item = JobItem(
                job_id=job_id,
                item_id=payload.item_id,
                quantity_used=payload.quantity_used,
            )
            db.add(job_item)
            await db.flush()

            item = await db.get(InventoryItem, payload.item_id)
            out = JobItemOut(
                id=job_item.id,
                job_id=job_id,
                item_id=payload.item_id,
                item_name=item.name,
                quantity_used=job_item.quantity_used,
                remaining_stock=item.current_stock,
                movement_id=movement.id,
                created_at=job_item.created_at,
            )

            await db.commit()
            return out

    out = await run_unit_of_work(db, _work, operation="create_job_item")
    logger.info(
        "Job item recorded",
        extra={
            "job_id": job_id,
            "item_id": out.item_id,
            "quantity_used": out.quantity_used,
            "movement_id": out.movement_id,
        },
    )
    return out


# ---------------- LIST ----------------
async def list_job_items(db: AsyncSession, job_id: int) -> JobItemListData:
    await _ensure_job(db, job_id)

    result = await db.execute(
        select(
            JobItem.id,
            JobItem.job_id,
            JobItem.item_id,
            InventoryItem.name.label("item_name"),
            JobItem.quantity_used,
            JobItem.created_at,
        )
        .join(InventoryItem, InventoryItem.id == JobItem.item_id)
        .where(JobItem.job_id == job_id)
        .order_by(JobItem.created_at.asc(), JobItem.id.asc())
    )

    items = [
        JobItemOut(
            id=r.id,
            job_id=r.job_id,
            item_id=r.item_id,
            item_name=r.item_name,
            quantity_used=r.quantity_used,
            created_at=r.created_at,
        )
        for r in result.all()
    ]

    return JobItemListData(total=len(items), items=items)
