from app.scripts.seed_defaults import DEFAULT_CATEGORIES, SAMPLE_POUCHES, seed_defaults
from app.services.inventory.category_service import list_categories
from app.services.inventory.pouch_service import list_pouches


def test_seed_is_idempotent(run):
    first = run(seed_defaults)
    second = run(seed_defaults)

    assert first == {"categories": len(DEFAULT_CATEGORIES), "pouches": len(SAMPLE_POUCHES)}
    assert second == {"categories": 0, "pouches": 0}

    categories = run(list_categories)
    pouches = run(list_pouches)
    assert categories.total == 6
    assert [p.pouch_number for p in pouches.items] == [1, 2, 3]
    assert pouches.items[0].label == "Pouch A1"
