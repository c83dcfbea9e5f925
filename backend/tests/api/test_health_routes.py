"""Health route tests — liveness, readiness and the root banner."""

import canteen.infrastructure.database as db_module


async def test_root(client):
    resp = await client.get("/")
    assert resp.json() == {"message": "Campus Canteen API is running"}


async def test_liveness(client):
    resp = await client.get("/api/v1/health/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


async def test_readiness_with_database(client):
    resp = await client.get("/api/v1/health/ready")
    assert resp.status_code == 200
    checks = resp.json()["checks"]
    assert checks["database"] == "healthy"
    assert checks["payments"] == "configured"
    assert checks["images"] in {"configured", "not_configured"}


async def test_readiness_without_database(client, monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    resp = await client.get("/api/v1/health/ready")
    assert resp.status_code == 503
    assert resp.json()["reason"] == "database_unavailable"


async def test_unknown_route_is_404(client):
    assert (await client.get("/api/nothing-here")).status_code == 404
