def _create_item(client, category_id, name, **fields):
    res = client.post(
        "/inventory/items/",
        json={"name": name, "category_id": category_id, **fields},
    )
    assert res.status_code == 200, res.text
    return res.json()["data"]


def test_manual_pouch_lifecycle(client):
    res = client.post("/pouches/", json={"label": "Pouch A1", "location": "Shelf A, Row 1"})
    assert res.status_code == 200, res.text
    pouch = res.json()["data"]
    assert pouch["pouch_number"] == 1
    assert pouch["item_count"] == 0
    assert pouch["capacity"] == 10
    assert pouch["free_slots"] == 10

    res = client.patch(f"/pouches/{pouch['id']}", json={"location": "Shelf B"})
    assert res.status_code == 200, res.text
    assert res.json()["data"]["location"] == "Shelf B"

    res = client.patch(f"/pouches/{pouch['id']}", json={})
    assert res.status_code == 400


def test_pouch_detail_lists_contents(client):
    category_id = client.post("/categories/", json={"name": "Tools"}).json()["data"]["id"]
    _create_item(client, category_id, "Tweezers", current_stock=2)
    _create_item(client, category_id, "Pliers")

    pouches = client.get("/pouches/").json()["data"]
    assert pouches["total"] == 1
    pouch_id = pouches["items"][0]["id"]

    res = client.get(f"/pouches/{pouch_id}")
    assert res.status_code == 200, res.text
    detail = res.json()["data"]
    assert detail["item_count"] == 2
    assert detail["free_slots"] == 8
    assert [i["name"] for i in detail["items"]] == ["Pliers", "Tweezers"]


def test_delete_pouch_unassigns_items(client):
    category_id = client.post("/categories/", json={"name": "Tools"}).json()["data"]["id"]
    item = _create_item(client, category_id, "Tweezers")

    res = client.delete(f"/pouches/{item['pouch_id']}")
    assert res.status_code == 200, res.text
    assert res.json()["data"]["item_count"] == 1

    data = client.get(f"/inventory/items/{item['id']}").json()["data"]
    assert data["pouch_id"] is None

    # the next allocation opens a fresh pouch with a new number
    other = _create_item(client, category_id, "Pliers")
    assert other["pouch_number"] == 2


def test_missing_pouch(client):
    res = client.get("/pouches/42")

    assert res.status_code == 404
    assert res.json()["error_code"] == "POUCH_NOT_FOUND"


def test_item_with_unknown_pouch(client):
    category_id = client.post("/categories/", json={"name": "Tools"}).json()["data"]["id"]

    res = client.post(
        "/inventory/items/",
        json={"name": "Tweezers", "category_id": category_id, "pouch_id": 42},
    )

    assert res.status_code == 404
    assert res.json()["error_code"] == "POUCH_NOT_FOUND"
