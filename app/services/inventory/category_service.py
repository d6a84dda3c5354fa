# app/services/inventory/category_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func, and_
from sqlalchemy.exc import IntegrityError

from app.models.inventory.category_models import Category, DEFAULT_CATEGORY_COLOR
from app.models.inventory.inventory_item_models import InventoryItem
from app.schemas.inventory.category_schemas import (
    CategoryCreate,
    CategoryUpdate,
    CategoryOut,
    CategoryListData,
)
from app.core.exceptions import ValidationError, NotFoundError, ConflictError, ConcurrencyError
from app.core.transactions import run_unit_of_work
from app.constants.error_codes import ErrorCode
from app.utils.text_utils import clean_optional, require_text
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _map_category(category: Category, item_count: int = 0) -> CategoryOut:
    return CategoryOut(
        id=category.id,
        name=category.name,
        description=category.description,
        icon=category.icon,
        color=category.color,
        item_count=item_count or 0,
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


def _category_with_count():
    return (
        select(Category, func.count(InventoryItem.id).label("item_count"))
        .outerjoin(
            InventoryItem,
            and_(
                InventoryItem.category_id == Category.id,
                InventoryItem.is_active.is_(True),
            ),
        )
        .group_by(Category.id)
    )


async def _ensure_name_available(db: AsyncSession, name: str, exclude_id: int | None = None):
    stmt = select(Category.id).where(func.lower(Category.name) == name.lower())
    if exclude_id is not None:
        stmt = stmt.where(Category.id != exclude_id)

    if await db.scalar(stmt):
        raise ConflictError(
            "Category name already exists",
            ErrorCode.CATEGORY_NAME_EXISTS,
        )


async def _get_or_404(db: AsyncSession, category_id: int) -> Category:
    category = await db.get(Category, category_id, populate_existing=True)
    if not category:
        raise NotFoundError("Category not found", ErrorCode.CATEGORY_NOT_FOUND)
    return category


# ---------------- LIST ----------------
async def list_categories(db: AsyncSession) -> CategoryListData:
    rows = (
        await db.execute(_category_with_count().order_by(Category.name.asc()))
    ).all()

    return CategoryListData(
        total=len(rows),
        items=[_map_category(category, count) for category, count in rows],
    )


# ---------------- GET ----------------
async def get_category(db: AsyncSession, category_id: int) -> CategoryOut:
    row = (
        await db.execute(_category_with_count().where(Category.id == category_id))
    ).first()
    if not row:
        raise NotFoundError("Category not found", ErrorCode.CATEGORY_NOT_FOUND)
    return _map_category(row[0], row[1])


# ---------------- CREATE ----------------
async def create_category(db: AsyncSession, payload: CategoryCreate) -> CategoryOut:
    name = require_text(payload.name, "Category name is required", ErrorCode.CATEGORY_NAME_REQUIRED)

    async def _work():
        await _ensure_name_available(db, name)

        category = Category(
            name=name,
            description=clean_optional(payload.description),
            icon=clean_optional(payload.icon),
            color=payload.color or DEFAULT_CATEGORY_COLOR,
        )
        db.add(category)

        try:
            await db.flush()
        except IntegrityError as exc:
            # lost a race on the unique name index, the retry reports the conflict
            raise ConcurrencyError() from exc

        await db.commit()
        return category

    category = await run_unit_of_work(db, _work, operation="create_category")
    logger.info("Category created", extra={"category_id": category.id})
    return _map_category(category)


# ---------------- UPDATE ----------------
async def update_category(
    db: AsyncSession,
    category_id: int,
    payload: CategoryUpdate,
) -> CategoryOut:
    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        raise ValidationError("No changes provided")

    if "name" in updates:
        updates["name"] = require_text(
            updates["name"], "Category name is required", ErrorCode.CATEGORY_NAME_REQUIRED
        )

    for field in ("description", "icon"):
        if field in updates:
            updates[field] = clean_optional(updates[field])

    if "color" in updates and updates["color"] is None:
        updates["color"] = DEFAULT_CATEGORY_COLOR

    async def _work():
        current = await _get_or_404(db, category_id)

        if "name" in updates and updates["name"].lower() != current.name.lower():
            await _ensure_name_available(db, updates["name"], exclude_id=category_id)

        for field, value in updates.items():
            setattr(current, field, value)

        try:
            await db.flush()
        except IntegrityError as exc:
            raise ConcurrencyError() from exc

        await db.commit()

    await run_unit_of_work(db, _work, operation="update_category")
    return await get_category(db, category_id)


# ---------------- DELETE ----------------
async def delete_category(db: AsyncSession, category_id: int) -> CategoryOut:
    """Items in the category survive with their category cleared."""

    async def _work():
        row = (
            await db.execute(_category_with_count().where(Category.id == category_id))
        ).first()
        if not row:
            raise NotFoundError("Category not found", ErrorCode.CATEGORY_NOT_FOUND)

        snapshot = _map_category(row[0], row[1])

        cleared = await db.execute(
            update(InventoryItem)
            .where(InventoryItem.category_id == category_id)
            .values(category_id=None)
        )
        await db.execute(delete(Category).where(Category.id == category_id))
        await db.commit()

        logger.info(
            "Category deleted",
            extra={"category_id": category_id, "items_cleared": cleared.rowcount},
        )
        return snapshot

    return await run_unit_of_work(db, _work, operation="delete_category")
