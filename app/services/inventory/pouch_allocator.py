# app/services/inventory/pouch_allocator.py

from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import config
from app.models.inventory.pouch_models import Pouch, AUTO_POUCH_LABEL
from app.models.inventory.inventory_item_models import InventoryItem
from app.services.system.sequence_service import next_number, POUCH_NUMBER_SEQUENCE
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Every write that changes pouch occupancy runs inside this section
POUCH_ALLOCATION_LOCK = "pouch-allocation"


def occupancy_query():
    """Pouches with their count of active items, inactive items hold no slot."""
    item_count = func.count(InventoryItem.id).label("item_count")
    return (
        select(Pouch, item_count)
        .outerjoin(
            InventoryItem,
            and_(
                InventoryItem.pouch_id == Pouch.id,
                InventoryItem.is_active.is_(True),
            ),
        )
        .group_by(Pouch.id)
    )


async def pouch_item_count(db: AsyncSession, pouch_id: int) -> int:
    count = await db.scalar(
        select(func.count(InventoryItem.id)).where(
            InventoryItem.pouch_id == pouch_id,
            InventoryItem.is_active.is_(True),
        )
    )
    return count or 0


async def find_pouch_with_space(db: AsyncSession, capacity: int) -> Pouch | None:
    stmt = (
        occupancy_query()
        .having(func.count(InventoryItem.id) < capacity)
        .order_by(Pouch.pouch_number.asc())
        .limit(1)
    )
    row = (await db.execute(stmt)).first()
    return row[0] if row else None


async def create_pouch_record(
    db: AsyncSession,
    *,
    label: str | None,
    description: str | None = None,
    location: str | None = None,
) -> Pouch:
    number = await next_number(db, POUCH_NUMBER_SEQUENCE, floor_column=Pouch.pouch_number)

    pouch = Pouch(
        pouch_number=number,
        label=label,
        description=description,
        location=location,
    )
    db.add(pouch)
    await db.flush()
    return pouch


async def assign_pouch(db: AsyncSession, capacity: int | None = None) -> Pouch:
    """
    Pick the lowest-numbered pouch with a free slot, opening a new pouch
    when every existing one is full.

    Must run inside POUCH_ALLOCATION_LOCK and in the same transaction as the
    item insert it serves. Nothing is committed here.
    """
    capacity = config.POUCH_CAPACITY if capacity is None else capacity

    pouch = await find_pouch_with_space(db, capacity)
    if pouch is not None:
        logger.debug("Allocated pouch #%s", pouch.pouch_number)
        return pouch

    pouch = await create_pouch_record(db, label=AUTO_POUCH_LABEL)
    logger.info("All pouches full (capacity %s), opened pouch #%s", capacity, pouch.pouch_number)
    return pouch
