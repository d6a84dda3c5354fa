# app/services/inventory/stock_ledger_service.py

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import noload

from app.core import config
from app.core.exceptions import ValidationError, NotFoundError, ConflictError
from app.constants.error_codes import ErrorCode
from app.constants.stock_movement_type import (
    StockMovementType,
    REASON_INITIAL_STOCK,
    NOTE_INITIAL_STOCK,
    REASON_JOB_USAGE,
)
from app.models.inventory.inventory_item_models import InventoryItem
from app.models.inventory.stock_movement_models import StockMovement
from app.schemas.inventory.stock_movement_schemas import (
    StockMovementOut,
    StockMovementListData,
    StockAuditOut,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)


def item_lock_key(item_id: int) -> str:
    return f"inventory-item:{item_id}"


# Signed contribution of one movement row to the item's stock
SIGNED_QUANTITY = case(
    (StockMovement.movement_type == StockMovementType.OUT, -StockMovement.quantity),
    else_=StockMovement.quantity,
)


# =====================================================
# WRITE SIDE (no commits, callers own the transaction)
# =====================================================
async def record_usage(
    db: AsyncSession,
    *,
    item_id: int,
    quantity_used: int,
    job_id: int,
) -> StockMovement:
    """
    Consume `quantity_used` of an item for a repair job: decrement the
    stored stock and append the matching OUT movement.

    Both writes land in the caller's transaction. Callers hold the item's
    exclusive section; the row is also selected FOR UPDATE.
    """
    if quantity_used <= 0:
        raise ValidationError("Quantity used must be positive")

    # ------------------------------------
    # 1. Lock item row (NO JOINS)
    # ------------------------------------
    item = await db.scalar(
        select(InventoryItem)
        .options(noload("*"))
        .where(InventoryItem.id == item_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    if not item:
        raise NotFoundError("Inventory item not found", ErrorCode.ITEM_NOT_FOUND)

    # ------------------------------------
    # 2. Stock policy
    # ------------------------------------
    new_stock = item.current_stock - quantity_used
    if new_stock < 0:
        if not config.ALLOW_NEGATIVE_STOCK:
            raise ConflictError(
                "Insufficient stock",
                ErrorCode.INSUFFICIENT_STOCK,
                details={
                    "item_id": item_id,
                    "current_stock": item.current_stock,
                    "requested": quantity_used,
                },
            )
        logger.warning(
            "Item %s goes negative (%s -> %s) for job %s",
            item_id,
            item.current_stock,
            new_stock,
            job_id,
        )

    # ------------------------------------
    # 3. Ledger row + derived counter
    # ------------------------------------
    movement = StockMovement(
        item_id=item.id,
        movement_type=StockMovementType.OUT,
        quantity=quantity_used,
        reason=REASON_JOB_USAGE,
        reference_id=str(job_id),
    )
    db.add(movement)

    item.current_stock = new_stock

    await db.flush()
    return movement


async def record_initial_stock(db: AsyncSession, item: InventoryItem) -> StockMovement | None:
    """IN movement for the opening stock of a freshly inserted item."""
    if item.id is None:
        raise RuntimeError("record_initial_stock() needs a flushed item")

    if not item.current_stock or item.current_stock <= 0:
        return None

    movement = StockMovement(
        item_id=item.id,
        movement_type=StockMovementType.IN,
        quantity=item.current_stock,
        reason=REASON_INITIAL_STOCK,
        notes=NOTE_INITIAL_STOCK,
    )
    db.add(movement)
    await db.flush()
    return movement


# =====================================================
# READ SIDE
# =====================================================
async def ledger_stock(db: AsyncSession, item_id: int) -> int:
    total = await db.scalar(
        select(func.coalesce(func.sum(SIGNED_QUANTITY), 0)).where(
            StockMovement.item_id == item_id
        )
    )
    return int(total or 0)


async def audit_item_stock(db: AsyncSession, item_id: int) -> StockAuditOut:
    current = await db.scalar(
        select(InventoryItem.current_stock).where(InventoryItem.id == item_id)
    )
    if current is None:
        raise NotFoundError("Inventory item not found", ErrorCode.ITEM_NOT_FOUND)

    derived = await ledger_stock(db, item_id)
    if derived != current:
        logger.warning(
            "Stock drift on item %s: stored=%s ledger=%s", item_id, current, derived
        )

    return StockAuditOut(
        item_id=item_id,
        current_stock=current,
        ledger_stock=derived,
        in_sync=derived == current,
    )


async def list_movements(
    db: AsyncSession,
    *,
    item_id: int | None = None,
    movement_type: StockMovementType | None = None,
    reference_id: str | None = None,
    page: int = 1,
    page_size: int = 50,
) -> StockMovementListData:
    filters = []

    if item_id is not None:
        filters.append(StockMovement.item_id == item_id)

    if movement_type is not None:
        filters.append(StockMovement.movement_type == movement_type)

    if reference_id:
        filters.append(StockMovement.reference_id == reference_id)

    total = await db.scalar(
        select(func.count()).select_from(
            select(StockMovement.id).where(*filters).subquery()
        )
    )

    result = await db.execute(
        select(StockMovement)
        .where(*filters)
        .order_by(StockMovement.created_at.desc(), StockMovement.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return StockMovementListData(
        total=total or 0,
        items=[StockMovementOut.model_validate(m) for m in result.scalars().all()],
    )
