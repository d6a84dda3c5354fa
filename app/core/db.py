# app/core/db.py

import ssl
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app.core.config import (
    DATABASE_URL,
    DB_POOL_SIZE,
    DB_MAX_OVERFLOW,
    DB_POOL_TIMEOUT,
    DB_SSL_VERIFY,
    DB_ECHO_POOL,
    SQLITE_BUSY_TIMEOUT,
    APP_ENV,
)
from app.core.exceptions import StorageError

# =====================================================
# BASE
# =====================================================
Base = declarative_base()

# =====================================================
# CONNECTION CONFIG
# =====================================================
def _postgres_options() -> tuple[dict, dict]:
    ssl_ctx = ssl.create_default_context()

    if not DB_SSL_VERIFY:
        ssl_ctx.check_hostname = False
        ssl_ctx.verify_mode = ssl.CERT_NONE

    connect_args = {
        "ssl": ssl_ctx,
        # Disable prepared statements (asyncpg + pgbouncer stability)
        "statement_cache_size": 0,
        "prepared_statement_cache_size": 0,
    }

    pool_args = {
        "pool_size": DB_POOL_SIZE,
        "max_overflow": DB_MAX_OVERFLOW,
        "pool_timeout": DB_POOL_TIMEOUT,
        "pool_pre_ping": True,
    }
    return connect_args, pool_args


def _sqlite_options() -> tuple[dict, dict]:
    # seconds a writer waits on a locked file before "database is locked"
    return {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT}, {}


def enable_sqlite_foreign_keys(dbapi_connection, _):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# =====================================================
# ENGINE / SESSION FACTORIES
# =====================================================
def build_engine(url: str, **engine_kwargs) -> AsyncEngine:
    """
    Engine for `url` with the connection options of its backend.
    `engine_kwargs` override the pool settings (tests pass a NullPool).
    """
    if url.startswith("sqlite"):
        connect_args, pool_args = _sqlite_options()
    else:
        connect_args, pool_args = _postgres_options()

    if "poolclass" in engine_kwargs:
        pool_args = {}
    pool_args.update(engine_kwargs)

    new_engine = create_async_engine(
        url,
        echo=False,                # NEVER enable in prod
        echo_pool=DB_ECHO_POOL,    # debugging only
        future=True,
        connect_args=connect_args,
        **pool_args,
    )

    if new_engine.dialect.name == "sqlite":
        event.listen(new_engine.sync_engine, "connect", enable_sqlite_foreign_keys)

    return new_engine


def build_session_factory(bind: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        bind=bind,
        class_=AsyncSession,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )


engine = build_engine(DATABASE_URL)
AsyncSessionLocal = build_session_factory(engine)

# =====================================================
# DEPENDENCY
# =====================================================
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


async def ping_database(db: AsyncSession) -> None:
    """Raise StorageError when the store cannot answer a trivial query."""
    try:
        await db.execute(text("SELECT 1"))
    except (DBAPIError, OSError) as exc:
        raise StorageError() from exc

# =====================================================
# MODEL IMPORT
# =====================================================
import app.models  # noqa

# =====================================================
# DEV ONLY: AUTO CREATE TABLES
# =====================================================
async def init_models():
    if APP_ENV != "development":
        raise RuntimeError("init_models() is forbidden outside development")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
