# app/routers/inventory/inventory_item_router.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.inventory.inventory_item_schemas import (
    InventoryItemCreate,
    InventoryItemUpdate,
    InventoryItemOut,
    InventoryItemListData,
    StockState,
)
from app.schemas.inventory.stock_movement_schemas import (
    StockMovementListData,
    StockAuditOut,
)
from app.services.inventory.inventory_item_service import (
    create_item,
    list_items,
    get_item,
    update_item,
    deactivate_item,
    reactivate_item,
    delete_item,
)
from app.services.inventory.stock_ledger_service import list_movements, audit_item_stock
from app.utils.response import APIResponse, success_response, ERROR_RESPONSES
from app.utils.logger import get_logger

router = APIRouter(prefix="/inventory/items", tags=["Inventory Items"], responses=ERROR_RESPONSES)
logger = get_logger(__name__)


@router.post("/", response_model=APIResponse[InventoryItemOut])
async def create_item_api(
    payload: InventoryItemCreate,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Create inventory item", extra={"sku": payload.sku})
    item = await create_item(db, payload)
    return success_response("Item added successfully", item)


@router.get("/", response_model=APIResponse[InventoryItemListData])
async def list_items_api(
    db: AsyncSession = Depends(get_db),
    search: str | None = Query(None, description="Name, description, SKU or supplier"),
    category: str | None = Query(None, description="Exact category name, 'all' for any"),
    stock_state: StockState = Query(StockState.all),
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1, le=500),
):
    data = await list_items(
        db,
        search=search,
        category=category,
        stock_state=stock_state,
        page=page,
        page_size=page_size,
    )
    return success_response("Items fetched successfully", data)


@router.get("/{item_id}", response_model=APIResponse[InventoryItemOut])
async def get_item_api(item_id: int, db: AsyncSession = Depends(get_db)):
    item = await get_item(db, item_id)
    return success_response("Item fetched successfully", item)


@router.patch("/{item_id}", response_model=APIResponse[InventoryItemOut])
async def update_item_api(
    item_id: int,
    payload: InventoryItemUpdate,
    db: AsyncSession = Depends(get_db),
):
    item = await update_item(db, item_id, payload)
    return success_response("Item updated successfully", item)


@router.patch("/{item_id}/deactivate", response_model=APIResponse[InventoryItemOut])
async def deactivate_item_api(item_id: int, db: AsyncSession = Depends(get_db)):
    item = await deactivate_item(db, item_id)
    return success_response("Item deactivated successfully", item)


@router.patch("/{item_id}/activate", response_model=APIResponse[InventoryItemOut])
async def reactivate_item_api(item_id: int, db: AsyncSession = Depends(get_db)):
    item = await reactivate_item(db, item_id)
    return success_response("Item reactivated successfully", item)


@router.delete("/{item_id}", response_model=APIResponse[InventoryItemOut])
async def delete_item_api(item_id: int, db: AsyncSession = Depends(get_db)):
    item = await delete_item(db, item_id)
    return success_response("Item deleted successfully", item)


@router.get("/{item_id}/movements", response_model=APIResponse[StockMovementListData])
async def list_item_movements_api(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
):
    await get_item(db, item_id)
    data = await list_movements(db, item_id=item_id, page=page, page_size=page_size)
    return success_response("Stock movements fetched successfully", data)


@router.get("/{item_id}/stock-audit", response_model=APIResponse[StockAuditOut])
async def audit_item_stock_api(item_id: int, db: AsyncSession = Depends(get_db)):
    audit = await audit_item_stock(db, item_id)
    return success_response("Stock audit completed", audit)
