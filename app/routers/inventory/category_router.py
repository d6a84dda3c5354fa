# app/routers/inventory/category_router.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.inventory.category_schemas import (
    CategoryCreate,
    CategoryUpdate,
    CategoryOut,
    CategoryListData,
)
from app.services.inventory.category_service import (
    list_categories,
    get_category,
    create_category,
    update_category,
    delete_category,
)
from app.utils.response import APIResponse, success_response, ERROR_RESPONSES
from app.utils.logger import get_logger

router = APIRouter(prefix="/categories", tags=["Categories"], responses=ERROR_RESPONSES)
logger = get_logger(__name__)


@router.get("/", response_model=APIResponse[CategoryListData])
async def list_categories_api(db: AsyncSession = Depends(get_db)):
    data = await list_categories(db)
    return success_response("Categories fetched successfully", data)


@router.post("/", response_model=APIResponse[CategoryOut])
async def create_category_api(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Create category", extra={"category_name": payload.name})
    category = await create_category(db, payload)
    return success_response("Category created successfully", category)


@router.get("/{category_id}", response_model=APIResponse[CategoryOut])
async def get_category_api(category_id: int, db: AsyncSession = Depends(get_db)):
    category = await get_category(db, category_id)
    return success_response("Category fetched successfully", category)


@router.patch("/{category_id}", response_model=APIResponse[CategoryOut])
async def update_category_api(
    category_id: int,
    payload: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
):
    category = await update_category(db, category_id, payload)
    return success_response("Category updated successfully", category)


@router.delete("/{category_id}", response_model=APIResponse[CategoryOut])
async def delete_category_api(category_id: int, db: AsyncSession = Depends(get_db)):
    category = await delete_category(db, category_id)
    return success_response("Category deleted successfully", category)
