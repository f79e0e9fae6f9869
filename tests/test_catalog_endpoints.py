import pytest
from fastapi.testclient import TestClient

from apna_thela.catalog import InventoryStore, get_inventory_store
from apna_thela.main import app


client = TestClient(app)


@pytest.fixture
def fresh_inventory():
    store = InventoryStore.from_file()
    app.dependency_overrides[get_inventory_store] = lambda: store
    yield store
    app.dependency_overrides.clear()


def test_health():
    assert client.get("/api/health").json()["status"] == "ok"


def test_app_shell_served():
    for path in ["/", "/index.html", "/manifest.json"]:
        assert client.get(path).status_code == 200, path
    assert "Apna Thela" in client.get("/").text


def test_inventory_uses_camel_case_keys(fresh_inventory):
    body = client.get("/api/inventory").json()
    assert len(body) == 6
    assert {"nameHi", "minThreshold", "stockStatus"} <= set(body[0])


def test_low_stock(fresh_inventory):
    body = client.get("/api/inventory/low-stock").json()
    assert {item["id"] for item in body} == {"inv-onions", "inv-chili"}
    assert all(item["quantity"] <= item["minThreshold"] for item in body)


def test_update_stock_status(fresh_inventory):
    resp = client.patch("/api/inventory/inv-potatoes/status", json={"stockStatus": "empty"})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["stockStatus"] == "empty"
    assert body["lastUpdated"] is not None


def test_update_stock_status_rejects_unknown_status(fresh_inventory):
    resp = client.patch("/api/inventory/inv-potatoes/status", json={"stockStatus": "overflowing"})
    assert resp.status_code == 400


def test_update_stock_status_unknown_item(fresh_inventory):
    resp = client.patch("/api/inventory/nope/status", json={"stockStatus": "low"})
    assert resp.status_code == 404


def test_suppliers_and_categories():
    suppliers = client.get("/api/suppliers").json()
    assert len(suppliers) == 5
    assert suppliers[0]["deliveryTime"] == "Same day"
    categories = client.get("/api/suppliers/categories").json()
    assert categories == ["vegetables", "spices", "oil", "dairy", "meat"]


def test_rate_limit_middleware():
    from fastapi import FastAPI
    from apna_thela.middleware import RateLimitMiddleware

    limited = FastAPI()
    limited.add_middleware(RateLimitMiddleware, max_requests=2, window_seconds=60)

    @limited.get("/ping")
    def ping():
        return {"ok": True}

    c = TestClient(limited)
    assert c.get("/ping").status_code == 200
    assert c.get("/ping").status_code == 200
    resp = c.get("/ping")
    assert resp.status_code == 429
    assert resp.json() == {"error": "rate_limited"}


def test_rate_limit_forgets_idle_clients(monkeypatch):
    from fastapi import FastAPI
    from apna_thela.middleware import RateLimitMiddleware

    limited = FastAPI()
    limited.add_middleware(RateLimitMiddleware, max_requests=5, window_seconds=60)

    @limited.get("/ping")
    def ping():
        return {"ok": True}

    clock = {"now": 1000.0}

    class FakeTime:
        @staticmethod
        def time():
            return clock["now"]

    monkeypatch.setattr("apna_thela.middleware.time", FakeTime)
    c = TestClient(limited)
    c.get("/ping")
    limiter = limited.middleware_stack
    while not isinstance(limiter, RateLimitMiddleware):
        limiter = limiter.app
    limiter.buckets["10.0.0.9"] = [clock["now"]]

    clock["now"] += 120
    c.get("/ping")
    assert list(limiter.buckets) == ["testclient"]
