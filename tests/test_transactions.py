import asyncio
import json
import sqlite3

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.requests import Request

from app.core.error_handlers import database_error_handler
from app.core.exceptions import ConcurrencyError, StorageError, ValidationError
from app.core.transactions import exclusive_section, run_unit_of_work, translate_db_error


class _SerializationFailure(Exception):
    sqlstate = "40001"


def _flaky(failures: int):
    calls = {"count": 0}

    async def work():
        calls["count"] += 1
        if calls["count"] <= failures:
            raise ConcurrencyError()
        return "done"

    return work, calls


def test_retries_transient_conflicts(run):
    work, calls = _flaky(failures=2)

    result = run(lambda db: run_unit_of_work(db, work, operation="test", max_attempts=3))

    assert result == "done"
    assert calls["count"] == 3


def test_gives_up_after_max_attempts(run):
    work, calls = _flaky(failures=5)

    with pytest.raises(ConcurrencyError):
        run(lambda db: run_unit_of_work(db, work, operation="test", max_attempts=3))

    assert calls["count"] == 3


def test_other_errors_are_not_retried(run):
    calls = {"count": 0}

    async def work():
        calls["count"] += 1
        raise ValidationError("bad input")

    with pytest.raises(ValidationError):
        run(lambda db: run_unit_of_work(db, work, operation="test", max_attempts=3))

    assert calls["count"] == 1


def test_driver_conflicts_are_retried(run):
    calls = {"count": 0}

    async def work():
        calls["count"] += 1
        if calls["count"] == 1:
            raise OperationalError("UPDATE x", {}, sqlite3.OperationalError("database is locked"))
        return calls["count"]

    assert run(lambda db: run_unit_of_work(db, work, operation="test")) == 2


def test_translate_db_error():
    locked = OperationalError("UPDATE x", {}, sqlite3.OperationalError("database is locked"))
    assert isinstance(translate_db_error(locked), ConcurrencyError)

    serialization = OperationalError("UPDATE x", {}, _SerializationFailure("could not serialize"))
    assert isinstance(translate_db_error(serialization), ConcurrencyError)

    disk = OperationalError("SELECT 1", {}, sqlite3.OperationalError("disk I/O error"))
    assert isinstance(translate_db_error(disk), StorageError)

    assert isinstance(translate_db_error(ConnectionRefusedError()), StorageError)

    duplicate = IntegrityError("INSERT x", {}, sqlite3.IntegrityError("UNIQUE constraint failed"))
    assert translate_db_error(duplicate) is None
    assert translate_db_error(ValueError("nope")) is None


def test_exclusive_section_serializes_same_key(session_factory):
    events = []

    async def worker(name):
        async with session_factory() as db:
            async with exclusive_section(db, "shared-key"):
                events.append(f"{name}-in")
                await asyncio.sleep(0.01)
                events.append(f"{name}-out")

    async def scenario():
        await asyncio.gather(worker("a"), worker("b"))

    asyncio.run(scenario())

    assert events in (
        ["a-in", "a-out", "b-in", "b-out"],
        ["b-in", "b-out", "a-in", "a-out"],
    )


def test_database_errors_on_reads_use_the_envelope():
    request = Request({"type": "http", "method": "GET", "path": "/inventory/items/", "headers": []})
    exc = OperationalError("SELECT 1", {}, sqlite3.OperationalError("unable to open database file"))

    response = asyncio.run(database_error_handler(request, exc))

    assert response.status_code == 503
    body = json.loads(response.body)
    assert body["success"] is False
    assert body["error_code"] == "STORAGE_UNAVAILABLE"
