# Seed the default categories and sample pouches.
#   python -m app.scripts.seed_defaults

import asyncio

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import AsyncSessionLocal
from app.core.logging import setup_logging
from app.models.inventory.category_models import Category
from app.models.inventory.pouch_models import Pouch
from app.schemas.inventory.category_schemas import CategoryCreate
from app.schemas.inventory.pouch_schemas import PouchCreate
from app.services.inventory.category_service import create_category
from app.services.inventory.pouch_service import create_pouch
from app.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CATEGORIES = [
    CategoryCreate(name="ICs & Processors", description="Integrated circuits, processors, and chips", icon="Cpu", color="#3B82F6"),
    CategoryCreate(name="Mobile Parts", description="Phone components, screens, batteries", icon="Smartphone", color="#10B981"),
    CategoryCreate(name="Connectors", description="USB ports, charging connectors, audio jacks", icon="Cable", color="#F59E0B"),
    CategoryCreate(name="Capacitors", description="Various capacitors and electrical components", icon="Zap", color="#8B5CF6"),
    CategoryCreate(name="Resistors", description="Resistors and electrical resistance components", icon="Activity", color="#EF4444"),
    CategoryCreate(name="Tools", description="Repair tools and equipment", icon="Wrench", color="#6B7280"),
]

SAMPLE_POUCHES = [
    PouchCreate(label="Pouch A1", description="Small components storage", location="Shelf A, Row 1"),
    PouchCreate(label="Pouch A2", description="Medium components storage", location="Shelf A, Row 2"),
    PouchCreate(label="Pouch B1", description="Large components storage", location="Shelf B, Row 1"),
]


async def seed_defaults(db: AsyncSession) -> dict:
    """Idempotent: only missing categories and pouch labels are created."""
    created = {"categories": 0, "pouches": 0}

    for payload in DEFAULT_CATEGORIES:
        exists = await db.scalar(
            select(Category.id).where(func.lower(Category.name) == payload.name.lower())
        )
        if not exists:
            await create_category(db, payload)
            created["categories"] += 1

    for payload in SAMPLE_POUCHES:
        exists = await db.scalar(select(Pouch.id).where(Pouch.label == payload.label))
        if not exists:
            await create_pouch(db, payload)
            created["pouches"] += 1

    return created


async def main():
    setup_logging()
    async with AsyncSessionLocal() as session:
        created = await seed_defaults(session)
    logger.info(
        "Seed finished: %s categories, %s pouches created",
        created["categories"],
        created["pouches"],
    )


if __name__ == "__main__":
    asyncio.run(main())
