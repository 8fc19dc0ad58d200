"""Image serving and health probes."""

from marketplace.infrastructure import database
from marketplace.infrastructure.database import DatabaseSessionManager


async def test_unknown_image_is_404(client):
    res = await client.get("/api/images/missing.png")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "NOT_FOUND"


async def test_dot_names_are_not_served(client):
    res = await client.get("/api/images/..")
    assert res.status_code == 404


async def test_image_listing_empty(client):
    res = await client.get("/api/images")
    assert res.json() == {"images": []}


async def test_liveness(client):
    res = await client.get("/api/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_without_database_is_503(client, monkeypatch, image_store):
    monkeypatch.setattr(database, "db_manager", None)
    res = await client.get("/api/health/ready")
    assert res.status_code == 503
    assert res.json()["failed"] == ["database"]


async def test_readiness_with_database(client, monkeypatch, image_store):
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    monkeypatch.setattr(database, "db_manager", manager)
    try:
        res = await client.get("/api/health/ready")
    finally:
        await manager.dispose()
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_readiness_reports_missing_image_directory(
    client, monkeypatch, image_store,
):
    monkeypatch.setattr(database, "db_manager", None)
    image_store.base.rmdir()
    res = await client.get("/api/health/ready")
    assert res.status_code == 503
    assert res.json()["failed"] == ["database", "images"]
