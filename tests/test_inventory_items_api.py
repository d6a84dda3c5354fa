def _create_category(client, name: str) -> int:
    res = client.post("/categories/", json={"name": name})
    assert res.status_code == 200, res.text
    return res.json()["data"]["id"]


def _create_item(client, **fields) -> dict:
    res = client.post("/inventory/items/", json=fields)
    assert res.status_code == 200, res.text
    return res.json()["data"]


def _list(client, **params) -> dict:
    res = client.get("/inventory/items/", params=params)
    assert res.status_code == 200, res.text
    return res.json()["data"]


def _seed_stock(client):
    resistors = _create_category(client, "Resistors")
    capacitors = _create_category(client, "Capacitors")
    a = _create_item(client, name="10k Resistor", category_id=resistors, current_stock=20)
    b = _create_item(client, name="Low Cap", category_id=capacitors, current_stock=3)
    c = _create_item(client, name="Zero Cap", category_id=capacitors, current_stock=0)
    return a, b, c


def test_create_item_assigns_pouch_and_reports_stock(client):
    category_id = _create_category(client, "Resistors")

    item = _create_item(
        client,
        name="  10kΩ Resistor  ",
        category_id=category_id,
        current_stock=20,
        sku="RES-10K",
    )

    assert item["name"] == "10kΩ Resistor"
    assert item["category_name"] == "Resistors"
    assert item["pouch_number"] == 1
    assert item["current_stock"] == 20
    assert item["min_stock_level"] == 5
    assert item["stock_status"] == "in_stock"

    movements = client.get(f"/inventory/items/{item['id']}/movements").json()["data"]
    assert movements["total"] == 1
    assert movements["items"][0]["movement_type"] == "IN"
    assert movements["items"][0]["quantity"] == 20


def test_list_is_newest_first(client):
    a, b, c = _seed_stock(client)

    data = _list(client)

    assert data["total"] == 3
    assert [i["id"] for i in data["items"]] == [c["id"], b["id"], a["id"]]


def test_list_filters(client):
    a, b, c = _seed_stock(client)

    def ids(**params):
        return {i["id"] for i in _list(client, **params)["items"]}

    assert ids(search="cap") == {b["id"], c["id"]}
    assert ids(search="RESIST") == {a["id"]}
    assert ids(category="Capacitors") == {b["id"], c["id"]}
    assert ids(category="all") == {a["id"], b["id"], c["id"]}
    assert ids(stock_state="low") == {b["id"], c["id"]}
    assert ids(stock_state="out") == {c["id"]}
    assert ids(search="cap", stock_state="out") == {c["id"]}
    assert ids(search="100%") == set()


def test_list_pagination(client):
    a, b, c = _seed_stock(client)

    page = _list(client, page=2, page_size=2)

    assert page["total"] == 3
    assert [i["id"] for i in page["items"]] == [a["id"]]


def test_list_is_stable_across_reads(client):
    a, _, _ = _seed_stock(client)
    params = {"search": "cap", "stock_state": "low"}

    before = _list(client, **params)
    assert client.get(f"/inventory/items/{a['id']}").status_code == 200
    after = _list(client, **params)

    assert before == after


def test_create_item_validation(client):
    category_id = _create_category(client, "Tools")

    res = client.post("/inventory/items/", json={"name": "   ", "category_id": category_id})
    assert res.status_code == 400
    assert res.json()["error_code"] == "ITEM_NAME_REQUIRED"

    res = client.post("/inventory/items/", json={"name": "Tweezers"})
    assert res.status_code == 400
    assert res.json()["error_code"] == "ITEM_CATEGORY_REQUIRED"

    res = client.post("/inventory/items/", json={"name": "Tweezers", "category_id": 999})
    assert res.status_code == 404
    assert res.json()["error_code"] == "CATEGORY_NOT_FOUND"

    res = client.post(
        "/inventory/items/",
        json={"name": "Tweezers", "category_id": category_id, "current_stock": -1},
    )
    assert res.status_code == 422
    assert res.json()["success"] is False

    assert _list(client)["total"] == 0


def test_duplicate_sku_conflicts(client):
    category_id = _create_category(client, "Tools")
    _create_item(client, name="Tweezers", category_id=category_id, sku="TW-1")

    res = client.post(
        "/inventory/items/",
        json={"name": "Other tweezers", "category_id": category_id, "sku": "TW-1"},
    )

    assert res.status_code == 409
    assert res.json()["error_code"] == "ITEM_SKU_EXISTS"


def test_update_item_does_not_touch_stock(client):
    category_id = _create_category(client, "Tools")
    item = _create_item(client, name="Tweezers", category_id=category_id, current_stock=4)

    res = client.patch(
        f"/inventory/items/{item['id']}",
        json={"name": "Fine tweezers", "min_stock_level": 2, "current_stock": 99},
    )

    assert res.status_code == 200, res.text
    data = res.json()["data"]
    assert data["name"] == "Fine tweezers"
    assert data["current_stock"] == 4
    assert data["stock_status"] == "in_stock"

    res = client.patch(f"/inventory/items/{item['id']}", json={})
    assert res.status_code == 400


def test_deactivate_hides_item(client):
    category_id = _create_category(client, "Tools")
    item = _create_item(client, name="Tweezers", category_id=category_id)

    res = client.patch(f"/inventory/items/{item['id']}/deactivate")
    assert res.status_code == 200, res.text
    assert res.json()["data"]["is_active"] is False
    assert _list(client)["total"] == 0

    res = client.patch(f"/inventory/items/{item['id']}/deactivate")
    assert res.status_code == 409

    res = client.patch(f"/inventory/items/{item['id']}/activate")
    assert res.status_code == 200, res.text
    assert _list(client)["total"] == 1


def test_missing_item(client):
    res = client.get("/inventory/items/12345")

    assert res.status_code == 404
    body = res.json()
    assert body["success"] is False
    assert body["error_code"] == "ITEM_NOT_FOUND"


def test_stock_audit_endpoint(client):
    category_id = _create_category(client, "Tools")
    item = _create_item(client, name="Tweezers", category_id=category_id, current_stock=7)

    res = client.get(f"/inventory/items/{item['id']}/stock-audit")

    assert res.status_code == 200, res.text
    assert res.json()["data"] == {
        "item_id": item["id"],
        "current_stock": 7,
        "ledger_stock": 7,
        "in_sync": True,
    }


def test_delete_item(client):
    category_id = _create_category(client, "Tools")
    item = _create_item(client, name="Tweezers", category_id=category_id, current_stock=3)

    res = client.delete(f"/inventory/items/{item['id']}")
    assert res.status_code == 200, res.text
    assert client.get(f"/inventory/items/{item['id']}").status_code == 404

    movements = client.get("/inventory/movements/").json()["data"]
    assert movements["total"] == 1
    assert movements["items"][0]["item_id"] is None
