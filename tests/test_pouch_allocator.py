import asyncio

import pytest

from app.core import config
from app.core.transactions import exclusive_section
from app.constants.stock_movement_type import StockMovementType
from app.schemas.inventory.inventory_item_schemas import InventoryItemCreate
from app.schemas.inventory.pouch_schemas import PouchCreate
from app.services.inventory import inventory_item_service
from app.services.inventory.inventory_item_service import (
    create_item,
    deactivate_item,
    list_items,
    reactivate_item,
)
from app.services.inventory.pouch_allocator import POUCH_ALLOCATION_LOCK, assign_pouch
from app.services.inventory.pouch_service import create_pouch, delete_pouch, list_pouches
from app.services.inventory.stock_ledger_service import list_movements


def _item(category_id, name, **fields):
    return InventoryItemCreate(name=name, category_id=category_id, **fields)


def test_first_item_opens_pouch_one_with_initial_movement(run, category_id):
    async def scenario(db):
        item = await create_item(db, _item(category_id, "10kΩ Resistor", current_stock=20))
        movements = await list_movements(db, item_id=item.id)
        pouches = await list_pouches(db)
        return item, movements, pouches

    item, movements, pouches = run(scenario)

    assert item.pouch_number == 1
    assert pouches.total == 1
    assert pouches.items[0].item_count == 1

    assert movements.total == 1
    movement = movements.items[0]
    assert movement.movement_type == StockMovementType.IN
    assert movement.quantity == 20
    assert movement.item_id == item.id


def test_zero_opening_stock_writes_no_movement(run, category_id):
    async def scenario(db):
        item = await create_item(db, _item(category_id, "Flux pen"))
        return await list_movements(db, item_id=item.id)

    assert run(scenario).total == 0


def test_eleventh_item_opens_second_pouch(run, category_id):
    async def scenario(db):
        return [
            await create_item(db, _item(category_id, f"Part {i}"))
            for i in range(11)
        ]

    items = run(scenario)

    assert [i.pouch_number for i in items[:10]] == [1] * 10
    assert items[10].pouch_number == 2


def test_lowest_numbered_pouch_with_space_is_filled_first(run, category_id, monkeypatch):
    monkeypatch.setattr(config, "POUCH_CAPACITY", 2)

    async def scenario(db):
        first = await create_pouch(db, PouchCreate(label="Shelf A"))
        second = await create_pouch(db, PouchCreate(label="Shelf B"))
        items = [
            await create_item(db, _item(category_id, f"Part {i}"))
            for i in range(5)
        ]
        return first, second, items

    first, second, items = run(scenario)

    assert (first.pouch_number, second.pouch_number) == (1, 2)
    assert [i.pouch_number for i in items] == [1, 1, 2, 2, 3]


def test_explicit_pouch_is_respected(run, category_id):
    async def scenario(db):
        await create_pouch(db, PouchCreate(label="Shelf A"))
        chosen = await create_pouch(db, PouchCreate(label="Shelf B"))
        item = await create_item(db, _item(category_id, "Screen", pouch_id=chosen.id))
        return chosen, item, await list_pouches(db)

    chosen, item, pouches = run(scenario)

    assert item.pouch_id == chosen.id
    assert pouches.total == 2
    assert [p.item_count for p in pouches.items] == [0, 1]


def test_inactive_items_free_their_slot(run, category_id, monkeypatch):
    monkeypatch.setattr(config, "POUCH_CAPACITY", 2)

    async def scenario(db):
        a = await create_item(db, _item(category_id, "Part A"))
        await create_item(db, _item(category_id, "Part B"))
        await deactivate_item(db, a.id)
        return await create_item(db, _item(category_id, "Part C"))

    assert run(scenario).pouch_number == 1


def test_reactivated_item_moves_when_its_pouch_filled_up(run, category_id, monkeypatch):
    monkeypatch.setattr(config, "POUCH_CAPACITY", 2)

    async def scenario(db):
        a = await create_item(db, _item(category_id, "Part A"))
        await create_item(db, _item(category_id, "Part B"))
        await deactivate_item(db, a.id)
        await create_item(db, _item(category_id, "Part C"))
        return await reactivate_item(db, a.id), await list_pouches(db)

    a, pouches = run(scenario)

    assert a.is_active is True
    assert a.pouch_number == 2
    assert [(p.pouch_number, p.item_count) for p in pouches.items] == [(1, 2), (2, 1)]


def test_reactivated_item_keeps_its_pouch_when_there_is_room(run, category_id):
    async def scenario(db):
        a = await create_item(db, _item(category_id, "Part A"))
        await deactivate_item(db, a.id)
        return a, await reactivate_item(db, a.id)

    before, after = run(scenario)

    assert after.pouch_id == before.pouch_id


def test_failed_creation_leaves_nothing_behind(run, category_id, monkeypatch):
    async def broken_ledger(db, item):
        raise RuntimeError("ledger unavailable")

    monkeypatch.setattr(inventory_item_service, "record_initial_stock", broken_ledger)

    with pytest.raises(RuntimeError):
        run(lambda db: create_item(db, _item(category_id, "Screen", current_stock=20)))

    async def leftovers(db):
        return await list_items(db), await list_pouches(db), await list_movements(db)

    items, pouches, movements = run(leftovers)

    assert (items.total, pouches.total, movements.total) == (0, 0, 0)

    monkeypatch.undo()

    assert run(lambda db: create_item(db, _item(category_id, "Screen"))).pouch_number == 1


def test_zero_capacity_always_opens_a_new_pouch(run):
    async def scenario(db):
        await create_pouch(db, PouchCreate(label="Shelf A"))
        async with exclusive_section(db, POUCH_ALLOCATION_LOCK):
            return await assign_pouch(db, capacity=0)

    assert run(scenario).pouch_number == 2


    assert run(scenario).pouch_number == 1


def test_pouch_numbers_are_not_reused_after_delete(run):
    async def scenario(db):
        await create_pouch(db, PouchCreate(label="Shelf A"))
        second = await create_pouch(db, PouchCreate(label="Shelf B"))
        await delete_pouch(db, second.id)
        return await create_pouch(db, PouchCreate(label="Shelf C"))

    assert run(scenario).pouch_number == 3


def test_concurrent_creations_never_overflow_a_pouch(session_factory, category_id):
    count = 25

    async def create_one(i):
        async with session_factory() as db:
            return await create_item(db, _item(category_id, f"Part {i}"))

    async def scenario():
        items = await asyncio.gather(*(create_one(i) for i in range(count)))
        async with session_factory() as db:
            return items, await list_pouches(db)

    items, pouches = asyncio.run(scenario())

    assert len(items) == count
    assert all(i.pouch_id is not None for i in items)
    assert pouches.total == 3
    assert [p.pouch_number for p in pouches.items] == [1, 2, 3]
    assert [p.item_count for p in pouches.items] == [10, 10, 5]
