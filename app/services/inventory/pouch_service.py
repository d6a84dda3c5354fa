# app/services/inventory/pouch_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete

from app.core import config
from app.core.exceptions import ValidationError, NotFoundError
from app.core.transactions import run_unit_of_work, exclusive_section
from app.constants.error_codes import ErrorCode
from app.models.inventory.pouch_models import Pouch
from app.models.inventory.inventory_item_models import InventoryItem
from app.schemas.inventory.pouch_schemas import (
    PouchCreate,
    PouchUpdate,
    PouchOut,
    PouchDetailOut,
    PouchItemMini,
    PouchListData,
)
from app.services.inventory.pouch_allocator import (
    POUCH_ALLOCATION_LOCK,
    occupancy_query,
    create_pouch_record,
)
from app.utils.text_utils import clean_optional
from app.utils.logger import get_logger

logger = get_logger(__name__)


# =====================================================
# MAPPER
# =====================================================
def _map_pouch(pouch: Pouch, item_count: int) -> PouchOut:
    capacity = config.POUCH_CAPACITY
    return PouchOut(
        id=pouch.id,
        pouch_number=pouch.pouch_number,
        label=pouch.label,
        description=pouch.description,
        location=pouch.location,
        item_count=item_count or 0,
        capacity=capacity,
        free_slots=max(capacity - (item_count or 0), 0),
        created_at=pouch.created_at,
        updated_at=pouch.updated_at,
    )


async def _occupancy_row(db: AsyncSession, pouch_id: int):
    row = (
        await db.execute(
            occupancy_query()
            .where(Pouch.id == pouch_id)
            .execution_options(populate_existing=True)
        )
    ).first()
    if not row:
        raise NotFoundError("Pouch not found", ErrorCode.POUCH_NOT_FOUND)
    return row


# =====================================================
# LIST
# =====================================================
async def list_pouches(db: AsyncSession) -> PouchListData:
    rows = (
        await db.execute(occupancy_query().order_by(Pouch.pouch_number.asc()))
    ).all()

    return PouchListData(
        total=len(rows),
        items=[_map_pouch(pouch, count) for pouch, count in rows],
    )


# =====================================================
# GET (with contents)
# =====================================================
async def get_pouch(db: AsyncSession, pouch_id: int) -> PouchDetailOut:
    pouch, count = await _occupancy_row(db, pouch_id)

    result = await db.execute(
        select(
            InventoryItem.id,
            InventoryItem.name,
            InventoryItem.sku,
            InventoryItem.current_stock,
        )
        .where(
            InventoryItem.pouch_id == pouch_id,
            InventoryItem.is_active.is_(True),
        )
        .order_by(InventoryItem.name.asc())
    )

    return PouchDetailOut(
        **_map_pouch(pouch, count).model_dump(),
        items=[
            PouchItemMini(
                id=r.id,
                name=r.name,
                sku=r.sku,
                current_stock=r.current_stock,
            )
            for r in result.all()
        ],
    )


# =====================================================
# CREATE (manual)
# =====================================================
async def create_pouch(db: AsyncSession, payload: PouchCreate) -> PouchOut:
    async def _work():
        # shares the allocator's section so numbers and occupancy stay ordered
        async with exclusive_section(db, POUCH_ALLOCATION_LOCK):
            pouch = await create_pouch_record(
                db,
                label=clean_optional(payload.label),
                description=clean_optional(payload.description),
                location=clean_optional(payload.location),
            )
            await db.commit()
            return pouch

    pouch = await run_unit_of_work(db, _work, operation="create_pouch")
    logger.info("Pouch #%s created", pouch.pouch_number)
    return _map_pouch(pouch, 0)


# =====================================================
# UPDATE
# =====================================================
async def update_pouch(
    db: AsyncSession,
    pouch_id: int,
    payload: PouchUpdate,
) -> PouchOut:
    updates = {
        field: clean_optional(value)
        for field, value in payload.model_dump(exclude_unset=True).items()
    }
    if not updates:
        raise ValidationError("No changes provided")

    async def _work():
        pouch = await db.get(Pouch, pouch_id, populate_existing=True)
        if not pouch:
            raise NotFoundError("Pouch not found", ErrorCode.POUCH_NOT_FOUND)

        for field, value in updates.items():
            setattr(pouch, field, value)

        await db.commit()

    await run_unit_of_work(db, _work, operation="update_pouch")

    pouch, count = await _occupancy_row(db, pouch_id)
    return _map_pouch(pouch, count)


# =====================================================
# DELETE
# =====================================================
async def delete_pouch(db: AsyncSession, pouch_id: int) -> PouchOut:
    """Items stored in the pouch survive unassigned; they are not re-packed."""

    async def _work():
        async with exclusive_section(db, POUCH_ALLOCATION_LOCK):
            pouch, count = await _occupancy_row(db, pouch_id)
            snapshot = _map_pouch(pouch, count)

            await db.execute(
                update(InventoryItem)
                .where(InventoryItem.pouch_id == pouch_id)
                .values(pouch_id=None)
            )
            await db.execute(delete(Pouch).where(Pouch.id == pouch_id))
            await db.commit()
            return snapshot

    snapshot = await run_unit_of_work(db, _work, operation="delete_pouch")
    logger.info("Pouch #%s deleted, %s items unassigned", snapshot.pouch_number, snapshot.item_count)
    return snapshot
