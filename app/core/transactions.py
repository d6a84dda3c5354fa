# app/core/transactions.py

import asyncio
import weakref
import zlib
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, TypeVar

from sqlalchemy import select, func
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import CONCURRENCY_MAX_RETRIES
from app.core.exceptions import ConcurrencyError, StorageError
from app.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# serialization_failure, deadlock_detected, lock_not_available
RETRYABLE_SQLSTATES = {"40001", "40P01", "55P03"}

SQLITE_LOCK_MESSAGES = ("database is locked", "database table is locked")

# SQLite has no row locks or advisory locks, writers are serialized per process.
_local_locks: "weakref.WeakValueDictionary[tuple[int, str], asyncio.Lock]" = (
    weakref.WeakValueDictionary()
)


def _advisory_key(key: str) -> int:
    return zlib.crc32(key.encode("utf-8"))


def _local_lock(key: str) -> asyncio.Lock:
    slot = (id(asyncio.get_running_loop()), key)
    lock = _local_locks.get(slot)
    if lock is None:
        lock = asyncio.Lock()
        _local_locks[slot] = lock
    return lock


def dialect_name(db: AsyncSession) -> str:
    return db.get_bind().dialect.name


@asynccontextmanager
async def exclusive_section(db: AsyncSession, key: str):
    """
    Serialize units of work sharing `key`.

    PostgreSQL: transaction-scoped advisory lock, released on commit/rollback.
    SQLite: process-local lock, released when the block exits, so the
    block must enclose the commit.
    """
    if dialect_name(db) == "postgresql":
        await db.execute(select(func.pg_advisory_xact_lock(_advisory_key(key))))
        yield
        return

    async with _local_lock(key):
        try:
            yield
        except BaseException:
            # release the write transaction before the next waiter runs
            await db.rollback()
            raise


def translate_db_error(exc: Exception) -> Exception | None:
    """Map driver errors onto ConcurrencyError / StorageError, None if unmapped."""
    if isinstance(exc, OSError):
        return StorageError()

    if not isinstance(exc, DBAPIError) or isinstance(exc, IntegrityError):
        return None

    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in RETRYABLE_SQLSTATES:
        return ConcurrencyError()

    message = str(orig).lower()
    if any(m in message for m in SQLITE_LOCK_MESSAGES):
        return ConcurrencyError()

    if exc.connection_invalidated or isinstance(exc, (OperationalError, InterfaceError)):
        return StorageError()

    return None


async def run_unit_of_work(
    db: AsyncSession,
    work: Callable[[], Awaitable[T]],
    *,
    operation: str,
    max_attempts: int | None = None,
) -> T:
    """
    Run `work` (which commits on success) and roll back on any failure.

    ConcurrencyError, raised by `work` or translated from the driver, is
    retried up to `max_attempts` times before it reaches the caller.
    """
    attempts = max_attempts or CONCURRENCY_MAX_RETRIES

    for attempt in range(1, attempts + 1):
        try:
            return await work()
        except Exception as exc:
            await db.rollback()

            error = translate_db_error(exc) or exc

            if isinstance(error, ConcurrencyError) and attempt < attempts:
                logger.info(
                    "%s hit a transaction conflict, retrying (attempt %s/%s)",
                    operation,
                    attempt,
                    attempts,
                )
                continue

            if isinstance(error, ConcurrencyError):
                logger.warning("%s gave up after %s attempts", operation, attempts)
            elif isinstance(error, StorageError):
                logger.error("%s failed, storage unavailable: %s", operation, exc)

            if error is exc:
                raise
            raise error from exc

    raise ConcurrencyError()
