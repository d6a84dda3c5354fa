# app/services/system/sequence_service.py

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConcurrencyError
from app.models.system.number_sequences_models import NumberSequence

POUCH_NUMBER_SEQUENCE = "pouch_number"
JOB_NUMBER_SEQUENCE = "job_number"


async def next_number(db: AsyncSession, name: str, *, floor_column=None) -> int:
    """
    Hand out the next value of sequence `name`.

    The counter row is incremented in place, which row-locks it until the
    surrounding transaction ends. On first use the counter starts above the
    current max of `floor_column` so rows inserted outside the service keep
    their numbers.
    """
    value = await db.scalar(
        update(NumberSequence)
        .where(NumberSequence.name == name)
        .values(last_value=NumberSequence.last_value + 1)
        .returning(NumberSequence.last_value)
    )
    if value is not None:
        return value

    start = 0
    if floor_column is not None:
        start = await db.scalar(select(func.coalesce(func.max(floor_column), 0)))

    value = start + 1
    db.add(NumberSequence(name=name, last_value=value))

    try:
        await db.flush()
    except IntegrityError as exc:
        # another transaction created the counter first
        raise ConcurrencyError() from exc

    return value
