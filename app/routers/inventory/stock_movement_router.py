# app/routers/inventory/stock_movement_router.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.constants.stock_movement_type import StockMovementType
from app.schemas.inventory.stock_movement_schemas import StockMovementListData
from app.services.inventory.stock_ledger_service import list_movements
from app.utils.response import APIResponse, success_response, ERROR_RESPONSES

# Read-only: movements are only written by item creation and job usage
router = APIRouter(prefix="/inventory/movements", tags=["Stock Movements"], responses=ERROR_RESPONSES)


@router.get("/", response_model=APIResponse[StockMovementListData])
async def list_movements_api(
    db: AsyncSession = Depends(get_db),
    item_id: int | None = Query(None),
    movement_type: StockMovementType | None = Query(None),
    reference_id: str | None = Query(None, description="e.g. repair job id"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
):
    data = await list_movements(
        db,
        item_id=item_id,
        movement_type=movement_type,
        reference_id=reference_id,
        page=page,
        page_size=page_size,
    )
    return success_response("Stock movements fetched successfully", data)
