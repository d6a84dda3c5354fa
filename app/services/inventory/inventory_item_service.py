# app/services/inventory/inventory_item_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func, or_
from sqlalchemy.exc import IntegrityError

from app.core import config
from app.core.exceptions import ValidationError, NotFoundError, ConflictError, ConcurrencyError
from app.core.transactions import run_unit_of_work, exclusive_section
from app.constants.error_codes import ErrorCode
from app.models.inventory.inventory_item_models import InventoryItem
from app.models.inventory.category_models import Category
from app.models.inventory.pouch_models import Pouch
from app.models.inventory.stock_movement_models import StockMovement
from app.models.repairs.job_item_models import JobItem
from app.schemas.inventory.inventory_item_schemas import (
    InventoryItemCreate,
    InventoryItemUpdate,
    InventoryItemOut,
    InventoryItemListData,
    StockState,
    StockStatus,
)
from app.services.inventory.pouch_allocator import (
    POUCH_ALLOCATION_LOCK,
    assign_pouch,
    pouch_item_count,
)
from app.services.inventory.stock_ledger_service import record_initial_stock
from app.utils.text_utils import clean_optional, require_text
from app.utils.logger import get_logger

logger = get_logger(__name__)

TEXT_FIELDS = ("description", "sku", "supplier", "notes", "image_url")


# =====================================================
# MAPPER
# =====================================================
def stock_status(current: int, minimum: int) -> StockStatus:
    if current == 0:
        return StockStatus.out_of_stock
    if current <= minimum:
        return StockStatus.low_stock
    return StockStatus.in_stock


def map_item(item: InventoryItem) -> InventoryItemOut:
    category = item.category
    pouch = item.pouch
    return InventoryItemOut(
        id=item.id,
        name=item.name,
        description=item.description,
        sku=item.sku,

        category_id=item.category_id,
        category_name=category.name if category else None,
        category_color=category.color if category else None,

        pouch_id=item.pouch_id,
        pouch_number=pouch.pouch_number if pouch else None,

        current_stock=item.current_stock,
        min_stock_level=item.min_stock_level,
        stock_status=stock_status(item.current_stock, item.min_stock_level),

        purchase_price=item.purchase_price,
        selling_price=item.selling_price,
        supplier=item.supplier,
        notes=item.notes,
        image_url=item.image_url,

        is_active=item.is_active,

        created_at=item.created_at,
        updated_at=item.updated_at,
    )


# =====================================================
# VALIDATION HELPERS
# =====================================================
async def _ensure_category(db: AsyncSession, category_id: int):
    exists = await db.scalar(select(Category.id).where(Category.id == category_id))
    if not exists:
        raise NotFoundError("Category not found", ErrorCode.CATEGORY_NOT_FOUND)


async def _ensure_pouch(db: AsyncSession, pouch_id: int) -> Pouch:
    pouch = await db.get(Pouch, pouch_id)
    if not pouch:
        raise NotFoundError("Pouch not found", ErrorCode.POUCH_NOT_FOUND)
    return pouch


async def _ensure_sku_available(db: AsyncSession, sku: str, exclude_id: int | None = None):
    stmt = select(InventoryItem.id).where(InventoryItem.sku == sku)
    if exclude_id is not None:
        stmt = stmt.where(InventoryItem.id != exclude_id)

    if await db.scalar(stmt):
        raise ConflictError("SKU already exists", ErrorCode.ITEM_SKU_EXISTS)


async def _warn_if_over_capacity(db: AsyncSession, pouch: Pouch, incoming: int = 1):
    # capacity is a soft policy for explicit assignments
    count = await pouch_item_count(db, pouch.id)
    if count + incoming > config.POUCH_CAPACITY:
        logger.warning(
            "Pouch #%s will hold %s items (capacity %s)",
            pouch.pouch_number,
            count + incoming,
            config.POUCH_CAPACITY,
        )


async def _flush_item(db: AsyncSession):
    try:
        await db.flush()
    except IntegrityError as exc:
        # SKU taken between the check and the insert; the retry reports it
        raise ConcurrencyError() from exc


async def _load_item(db: AsyncSession, item_id: int) -> InventoryItem:
    item = await db.scalar(
        select(InventoryItem)
        .where(InventoryItem.id == item_id)
        .execution_options(populate_existing=True)
    )
    if not item:
        raise NotFoundError("Inventory item not found", ErrorCode.ITEM_NOT_FOUND)
    return item


# ---------------- CREATE ----------------
async def create_item(db: AsyncSession, payload: InventoryItemCreate) -> InventoryItemOut:
    """
    Insert an item, allocating a pouch when none is given, and write the
    IN movement for its opening stock. One transaction: either the item,
    its pouch binding and its movement all land, or nothing does.
    """
    data = payload.model_dump()
    data["name"] = require_text(data["name"], "Item name is required", ErrorCode.ITEM_NAME_REQUIRED)
    for field in TEXT_FIELDS:
        data[field] = clean_optional(data[field])

    if data["category_id"] is None:
        raise ValidationError("Category is required", ErrorCode.ITEM_CATEGORY_REQUIRED)

    async def _work():
        async with exclusive_section(db, POUCH_ALLOCATION_LOCK):
            await _ensure_category(db, data["category_id"])
            if data["sku"]:
                await _ensure_sku_available(db, data["sku"])

            if data["pouch_id"] is None:
                pouch = await assign_pouch(db)
            else:
                pouch = await _ensure_pouch(db, data["pouch_id"])
                await _warn_if_over_capacity(db, pouch)

            item = InventoryItem(**{**data, "pouch_id": pouch.id})
            db.add(item)
            await _flush_item(db)

            # needs the item id, so it follows the insert inside the same transaction
            await record_initial_stock(db, item)

            await db.commit()
            return item.id, pouch.pouch_number

    item_id, pouch_number = await run_unit_of_work(db, _work, operation="create_item")
    logger.info(
        "Inventory item created",
        extra={"item_id": item_id, "pouch_number": pouch_number},
    )
    return await get_item(db, item_id)


# ---------------- LIST ----------------
async def list_items(
    db: AsyncSession,
    *,
    search: str | None = None,
    category: str | None = None,
    stock_state: StockState = StockState.all,
    page: int = 1,
    page_size: int | None = None,
) -> InventoryItemListData:
    """
    Active items, newest first, matching every given filter:
    substring search over name/description/sku/supplier, exact category
    name, and the stock-state predicate.
    """
    filters = [InventoryItem.is_active.is_(True)]

    search = clean_optional(search)
    if search:
        filters.append(
            or_(
                InventoryItem.name.icontains(search, autoescape=True),
                InventoryItem.description.icontains(search, autoescape=True),
                InventoryItem.sku.icontains(search, autoescape=True),
                InventoryItem.supplier.icontains(search, autoescape=True),
            )
        )

    category = clean_optional(category)
    if category and category != "all":
        filters.append(Category.name == category)

    if stock_state == StockState.low:
        filters.append(InventoryItem.current_stock <= InventoryItem.min_stock_level)
    elif stock_state == StockState.out:
        filters.append(InventoryItem.current_stock == 0)

    total = await db.scalar(
        select(func.count(InventoryItem.id))
        .select_from(InventoryItem)
        .outerjoin(Category, InventoryItem.category_id == Category.id)
        .where(*filters)
    )

    stmt = (
        select(InventoryItem)
        .outerjoin(Category, InventoryItem.category_id == Category.id)
        .where(*filters)
        .order_by(InventoryItem.created_at.desc(), InventoryItem.id.desc())
        .execution_options(populate_existing=True)
    )
    if page_size:
        stmt = stmt.offset((page - 1) * page_size).limit(page_size)

    result = await db.execute(stmt)

    return InventoryItemListData(
        total=total or 0,
        items=[map_item(item) for item in result.scalars().all()],
    )


# ---------------- GET ----------------
async def get_item(db: AsyncSession, item_id: int) -> InventoryItemOut:
    return map_item(await _load_item(db, item_id))


# ---------------- UPDATE ----------------
async def update_item(
    db: AsyncSession,
    item_id: int,
    payload: InventoryItemUpdate,
) -> InventoryItemOut:
    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        raise ValidationError("No changes provided")

    if "name" in updates:
        updates["name"] = require_text(updates["name"], "Item name is required", ErrorCode.ITEM_NAME_REQUIRED)

    for field in TEXT_FIELDS:
        if field in updates:
            updates[field] = clean_optional(updates[field])

    for field in ("min_stock_level",):
        if field in updates and updates[field] is None:
            raise ValidationError(f"{field} cannot be null")

    async def _apply():
        current = await _load_item(db, item_id)

        if updates.get("category_id") is not None:
            await _ensure_category(db, updates["category_id"])

        if updates.get("sku") and updates["sku"] != current.sku:
            await _ensure_sku_available(db, updates["sku"], exclude_id=item_id)

        new_pouch_id = updates.get("pouch_id")
        if new_pouch_id is not None and new_pouch_id != current.pouch_id:
            pouch = await _ensure_pouch(db, new_pouch_id)
            if current.is_active:
                await _warn_if_over_capacity(db, pouch)

        for field, value in updates.items():
            setattr(current, field, value)

        await _flush_item(db)
        await db.commit()

    async def _work():
        if "pouch_id" in updates:
            async with exclusive_section(db, POUCH_ALLOCATION_LOCK):
                await _apply()
        else:
            await _apply()

    await run_unit_of_work(db, _work, operation="update_item")
    return await get_item(db, item_id)


# ---------------- ACTIVATE / DEACTIVATE ----------------
async def _set_active(db: AsyncSession, item_id: int, active: bool) -> InventoryItemOut:
    async def _work():
        async with exclusive_section(db, POUCH_ALLOCATION_LOCK):
            item = await _load_item(db, item_id)
            if item.is_active == active:
                raise ConflictError(
                    "Item is already active" if active else "Item is already inactive",
                    ErrorCode.CONFLICT,
                )

            if active and item.pouch is not None:
                # the freed slot may have been handed out meanwhile
                if await pouch_item_count(db, item.pouch_id) >= config.POUCH_CAPACITY:
                    pouch = await assign_pouch(db)
                    item.pouch_id = pouch.id
                    logger.info(
                        "Pouch #%s is full, reactivated item %s moved to pouch #%s",
                        item.pouch.pouch_number,
                        item.id,
                        pouch.pouch_number,
                    )

            item.is_active = active
            await db.commit()

    await run_unit_of_work(db, _work, operation="activate_item" if active else "deactivate_item")
    return await get_item(db, item_id)


async def deactivate_item(db: AsyncSession, item_id: int) -> InventoryItemOut:
    """Hide the item from listings and free its pouch slot."""
    return await _set_active(db, item_id, False)


async def reactivate_item(db: AsyncSession, item_id: int) -> InventoryItemOut:
    return await _set_active(db, item_id, True)


# ---------------- DELETE ----------------
async def delete_item(db: AsyncSession, item_id: int) -> InventoryItemOut:
    """
    Hard delete. Job usages of the item go with it; its stock movements are
    kept for the audit trail with item_id cleared.
    """

    async def _work():
        async with exclusive_section(db, POUCH_ALLOCATION_LOCK):
            snapshot = map_item(await _load_item(db, item_id))

            await db.execute(delete(JobItem).where(JobItem.item_id == item_id))
            await db.execute(
                update(StockMovement)
                .where(StockMovement.item_id == item_id)
                .values(item_id=None)
            )
            await db.execute(delete(InventoryItem).where(InventoryItem.id == item_id))
            await db.commit()
            return snapshot

    snapshot = await run_unit_of_work(db, _work, operation="delete_item")
    logger.info("Inventory item deleted", extra={"item_id": item_id})
    return snapshot
