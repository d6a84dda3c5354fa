# app/routers/inventory/pouch_router.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.inventory.pouch_schemas import (
    PouchCreate,
    PouchUpdate,
    PouchOut,
    PouchDetailOut,
    PouchListData,
)
from app.services.inventory.pouch_service import (
    list_pouches,
    get_pouch,
    create_pouch,
    update_pouch,
    delete_pouch,
)
from app.utils.response import APIResponse, success_response, ERROR_RESPONSES

router = APIRouter(prefix="/pouches", tags=["Pouches"], responses=ERROR_RESPONSES)


# =========================
# LIST (with occupancy)
# =========================
@router.get("/", response_model=APIResponse[PouchListData])
async def list_pouches_api(db: AsyncSession = Depends(get_db)):
    data = await list_pouches(db)
    return success_response("Pouches fetched successfully", data)


# =========================
# CREATE
# =========================
@router.post("/", response_model=APIResponse[PouchOut])
async def create_pouch_api(payload: PouchCreate, db: AsyncSession = Depends(get_db)):
    pouch = await create_pouch(db, payload)
    return success_response("Pouch created successfully", pouch)


# =========================
# GET (with contents)
# =========================
@router.get("/{pouch_id}", response_model=APIResponse[PouchDetailOut])
async def get_pouch_api(pouch_id: int, db: AsyncSession = Depends(get_db)):
    pouch = await get_pouch(db, pouch_id)
    return success_response("Pouch fetched successfully", pouch)


# =========================
# UPDATE
# =========================
@router.patch("/{pouch_id}", response_model=APIResponse[PouchOut])
async def update_pouch_api(
    pouch_id: int,
    payload: PouchUpdate,
    db: AsyncSession = Depends(get_db),
):
    pouch = await update_pouch(db, pouch_id, payload)
    return success_response("Pouch updated successfully", pouch)


# =========================
# DELETE
# =========================
@router.delete("/{pouch_id}", response_model=APIResponse[PouchOut])
async def delete_pouch_api(pouch_id: int, db: AsyncSession = Depends(get_db)):
    pouch = await delete_pouch(db, pouch_id)
    return success_response("Pouch deleted successfully", pouch)
