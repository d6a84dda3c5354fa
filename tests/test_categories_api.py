def _create(client, **fields):
    return client.post("/categories/", json=fields)


def test_create_and_list_categories(client):
    res = _create(client, name="Resistors", icon="Activity", color="#EF4444")
    assert res.status_code == 200, res.text
    assert res.json()["data"]["color"] == "#EF4444"

    res = _create(client, name="Capacitors")
    assert res.status_code == 200, res.text
    assert res.json()["data"]["color"] == "#3B82F6"

    data = client.get("/categories/").json()["data"]
    assert data["total"] == 2
    assert [c["name"] for c in data["items"]] == ["Capacitors", "Resistors"]


def test_category_name_rules(client):
    assert _create(client, name="Tools").status_code == 200

    res = _create(client, name="  tools ")
    assert res.status_code == 409
    assert res.json()["error_code"] == "CATEGORY_NAME_EXISTS"

    res = _create(client, name="   ")
    assert res.status_code == 400
    assert res.json()["error_code"] == "CATEGORY_NAME_REQUIRED"

    res = _create(client, name="Bad colour", color="blue")
    assert res.status_code == 422


def test_item_count_tracks_active_items(client):
    category_id = _create(client, name="Tools").json()["data"]["id"]
    for name in ("Tweezers", "Pliers"):
        res = client.post("/inventory/items/", json={"name": name, "category_id": category_id})
        assert res.status_code == 200, res.text

    assert client.get(f"/categories/{category_id}").json()["data"]["item_count"] == 2


def test_update_category(client):
    category_id = _create(client, name="Tools").json()["data"]["id"]

    res = client.patch(f"/categories/{category_id}", json={"name": "Hand tools", "color": None})
    assert res.status_code == 200, res.text
    data = res.json()["data"]
    assert data["name"] == "Hand tools"
    assert data["color"] == "#3B82F6"

    res = client.patch("/categories/999", json={"name": "Ghost"})
    assert res.status_code == 404
    assert res.json()["error_code"] == "CATEGORY_NOT_FOUND"


def test_delete_category_keeps_items(client):
    category_id = _create(client, name="Tools").json()["data"]["id"]
    item = client.post(
        "/inventory/items/", json={"name": "Tweezers", "category_id": category_id}
    ).json()["data"]

    res = client.delete(f"/categories/{category_id}")
    assert res.status_code == 200, res.text
    assert res.json()["data"]["item_count"] == 1

    assert client.get(f"/categories/{category_id}").status_code == 404

    data = client.get(f"/inventory/items/{item['id']}").json()["data"]
    assert data["category_id"] is None
    assert data["category_name"] is None
