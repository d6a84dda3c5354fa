# app/routers/repairs/repair_job_router.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.enums.repair_job_status import RepairJobStatus
from app.schemas.repairs.repair_job_schemas import (
    RepairJobCreate,
    RepairJobUpdate,
    RepairJobOut,
    RepairJobListData,
)
from app.schemas.repairs.job_item_schemas import JobItemCreate, JobItemOut, JobItemListData
from app.services.repairs.repair_job_service import (
    create_job,
    list_jobs,
    get_job,
    update_job,
    delete_job,
)
from app.services.repairs.job_item_service import create_job_item, list_job_items
from app.utils.response import APIResponse, success_response, ERROR_RESPONSES
from app.utils.logger import get_logger

router = APIRouter(prefix="/repairs/jobs", tags=["Repair Jobs"], responses=ERROR_RESPONSES)
logger = get_logger(__name__)


# =========================
# JOBS
# =========================
@router.post("/", response_model=APIResponse[RepairJobOut])
async def create_job_api(payload: RepairJobCreate, db: AsyncSession = Depends(get_db)):
    job = await create_job(db, payload)
    return success_response("Repair job created successfully", job)


@router.get("/", response_model=APIResponse[RepairJobListData])
async def list_jobs_api(
    db: AsyncSession = Depends(get_db),
    status: RepairJobStatus | None = Query(None),
    search: str | None = Query(None, description="Customer, phone, device or issue"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    data = await list_jobs(db, status=status, search=search, page=page, page_size=page_size)
    return success_response("Repair jobs fetched successfully", data)


@router.get("/{job_id}", response_model=APIResponse[RepairJobOut])
async def get_job_api(job_id: int, db: AsyncSession = Depends(get_db)):
    job = await get_job(db, job_id)
    return success_response("Repair job fetched successfully", job)


@router.patch("/{job_id}", response_model=APIResponse[RepairJobOut])
async def update_job_api(
    job_id: int,
    payload: RepairJobUpdate,
    db: AsyncSession = Depends(get_db),
):
    job = await update_job(db, job_id, payload)
    return success_response("Repair job updated successfully", job)


@router.delete("/{job_id}", response_model=APIResponse[RepairJobOut])
async def delete_job_api(job_id: int, db: AsyncSession = Depends(get_db)):
    job = await delete_job(db, job_id)
    return success_response("Repair job deleted successfully", job)


# =========================
# PARTS USED
# =========================
@router.post("/{job_id}/items", response_model=APIResponse[JobItemOut])
async def create_job_item_api(
    job_id: int,
    payload: JobItemCreate,
    db: AsyncSession = Depends(get_db),
):
    logger.info(
        "Record part usage",
        extra={"job_id": job_id, "item_id": payload.item_id},
    )
    job_item = await create_job_item(db, job_id, payload)
    return success_response("Part usage recorded successfully", job_item)


@router.get("/{job_id}/items", response_model=APIResponse[JobItemListData])
async def list_job_items_api(job_id: int, db: AsyncSession = Depends(get_db)):
    data = await list_job_items(db, job_id)
    return success_response("Job items fetched successfully", data)
