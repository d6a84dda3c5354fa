def test_health_check(client):
    res = client.get("/")

    assert res.status_code == 200
    assert res.json()["status"] == "ok"
    assert "X-Process-Time-Ms" in res.headers


def test_dashboard_summary(client):
    category_id = client.post("/categories/", json={"name": "Mobile Parts"}).json()["data"]["id"]
    for name, stock in (("Screen", 20), ("Battery", 2), ("Flex cable", 0)):
        res = client.post(
            "/inventory/items/",
            json={"name": name, "category_id": category_id, "current_stock": stock},
        )
        assert res.status_code == 200, res.text

    job = {"device_type": "Phone", "issue_description": "Won't charge"}
    client.post("/repairs/jobs/", json=job)
    client.post("/repairs/jobs/", json={**job, "status": "COMPLETED"})

    res = client.get("/dashboard/")

    assert res.status_code == 200, res.text
    data = res.json()["data"]
    assert data["stats"] == {
        "total_items": 3,
        "low_stock_items": 2,
        "active_repairs": 1,
        "categories_count": 1,
    }
    assert [i["name"] for i in data["recent_items"]] == ["Flex cable", "Battery", "Screen"]
    assert [i["name"] for i in data["low_stock"]] == ["Flex cable", "Battery"]


def test_request_id_is_echoed(client):
    res = client.get("/", headers={"X-Request-ID": "abc123"})

    assert res.headers["X-Request-ID"] == "abc123"
    assert res.json()["database"] == "ok"
