import asyncio
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import NullPool

os.environ["APP_ENV"] = "staging"
os.environ["DB_TYPE"] = "sqlite"
os.environ.setdefault("SQLITE_URL", "sqlite+aiosqlite:///./unused-test.db")

from app.core.db import Base, build_engine, build_session_factory, get_db  # noqa: E402
from app.schemas.inventory.category_schemas import CategoryCreate  # noqa: E402
from app.services.inventory.category_service import create_category  # noqa: E402
from main import app  # noqa: E402


@pytest.fixture()
def session_factory(tmp_path):
    engine = build_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'repair_lab.db'}",
        poolclass=NullPool,
    )

    async def _create_all():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create_all())

    yield build_session_factory(engine)

    asyncio.run(engine.dispose())


@pytest.fixture()
def run(session_factory):
    """Run `fn(db)` against a fresh session on its own event loop."""

    def _run(fn):
        async def _inner():
            async with session_factory() as db:
                return await fn(db)

        return asyncio.run(_inner())

    return _run


@pytest.fixture()
def category_id(run):
    category = run(lambda db: create_category(db, CategoryCreate(name="Resistors")))
    return category.id


@pytest.fixture()
def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
