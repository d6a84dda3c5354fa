# app/services/repairs/repair_job_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func, or_

from app.core.exceptions import ValidationError, NotFoundError
from app.core.transactions import run_unit_of_work, exclusive_section
from app.constants.error_codes import ErrorCode
from app.models.repairs.repair_job_models import RepairJob
from app.models.repairs.job_item_models import JobItem
from app.models.enums.repair_job_status import RepairJobStatus
from app.models.base.mixins import utcnow
from app.schemas.repairs.repair_job_schemas import (
    RepairJobCreate,
    RepairJobUpdate,
    RepairJobOut,
    RepairJobListData,
)
from app.services.system.sequence_service import next_number, JOB_NUMBER_SEQUENCE
from app.utils.text_utils import clean_optional, require_text
from app.utils.logger import get_logger

logger = get_logger(__name__)

JOB_NUMBERING_LOCK = "repair-job-numbering"

REQUIRED_FIELDS = {
    "device_type": "Device type is required",
    "issue_description": "Issue description is required",
}
OPTIONAL_TEXT_FIELDS = ("customer_name", "customer_phone", "device_model", "notes")


def _clean_job_fields(values: dict) -> dict:
    for field, message in REQUIRED_FIELDS.items():
        if field in values:
            values[field] = require_text(values[field], message, ErrorCode.JOB_FIELD_REQUIRED)

    for field in OPTIONAL_TEXT_FIELDS:
        if field in values:
            values[field] = clean_optional(values[field])

    return values


async def get_job_or_404(db: AsyncSession, job_id: int) -> RepairJob:
    job = await db.get(RepairJob, job_id, populate_existing=True)
    if not job:
        raise NotFoundError("Repair job not found", ErrorCode.JOB_NOT_FOUND)
    return job


# ---------------- CREATE ----------------
async def create_job(db: AsyncSession, payload: RepairJobCreate) -> RepairJobOut:
    data = _clean_job_fields(payload.model_dump())

    if data["status"] == RepairJobStatus.COMPLETED:
        data["completion_date"] = utcnow()

    async def _work():
        async with exclusive_section(db, JOB_NUMBERING_LOCK):
            number = await next_number(db, JOB_NUMBER_SEQUENCE, floor_column=RepairJob.job_number)

            job = RepairJob(job_number=number, **data)
            db.add(job)
            await db.flush()
            await db.commit()
            return job

    job = await run_unit_of_work(db, _work, operation="create_job")
    logger.info("Repair job #%s created", job.job_number)
    return RepairJobOut.model_validate(job)


# ---------------- LIST ----------------
async def list_jobs(
    db: AsyncSession,
    *,
    status: RepairJobStatus | None = None,
    search: str | None = None,
    page: int = 1,
    page_size: int = 20,
) -> RepairJobListData:
    filters = []

    if status is not None:
        filters.append(RepairJob.status == status)

    search = clean_optional(search)
    if search:
        filters.append(
            or_(
                RepairJob.customer_name.icontains(search, autoescape=True),
                RepairJob.customer_phone.icontains(search, autoescape=True),
                RepairJob.device_type.icontains(search, autoescape=True),
                RepairJob.device_model.icontains(search, autoescape=True),
                RepairJob.issue_description.icontains(search, autoescape=True),
            )
        )

    total = await db.scalar(
        select(func.count()).select_from(
            select(RepairJob.id).where(*filters).subquery()
        )
    )

    result = await db.execute(
        select(RepairJob)
        .where(*filters)
        .order_by(RepairJob.created_at.desc(), RepairJob.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return RepairJobListData(
        total=total or 0,
        items=[RepairJobOut.model_validate(j) for j in result.scalars().all()],
    )


# ---------------- GET ----------------
async def get_job(db: AsyncSession, job_id: int) -> RepairJobOut:
    return RepairJobOut.model_validate(await get_job_or_404(db, job_id))


# ---------------- UPDATE ----------------
async def update_job(
    db: AsyncSession,
    job_id: int,
    payload: RepairJobUpdate,
) -> RepairJobOut:
    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        raise ValidationError("No changes provided")

    if "status" in updates and updates["status"] is None:
        raise ValidationError("status cannot be null")

    updates = _clean_job_fields(updates)

    async def _work():
        job = await get_job_or_404(db, job_id)

        completing = (
            updates.get("status") == RepairJobStatus.COMPLETED
            and job.status != RepairJobStatus.COMPLETED
        )
        if completing and not updates.get("completion_date") and not job.completion_date:
            updates["completion_date"] = utcnow()

        for field, value in updates.items():
            setattr(job, field, value)

        await db.commit()
        return job

    job = await run_unit_of_work(db, _work, operation="update_job")
    return RepairJobOut.model_validate(job)


# ---------------- DELETE ----------------
async def delete_job(db: AsyncSession, job_id: int) -> RepairJobOut:
    """
    Removes the job and its part usages. Stock already consumed is not
    returned: the OUT movements stay in the ledger.
    """

    async def _work():
        job = await get_job_or_404(db, job_id)
        snapshot = RepairJobOut.model_validate(job)

        await db.execute(delete(JobItem).where(JobItem.job_id == job_id))
        await db.execute(delete(RepairJob).where(RepairJob.id == job_id))
        await db.commit()
        return snapshot

    snapshot = await run_unit_of_work(db, _work, operation="delete_job")
    logger.info("Repair job #%s deleted", snapshot.job_number)
    return snapshot
