"""Tests for health check endpoints."""

from httpx import AsyncClient

from journal import __version__


async def test_liveness_endpoint(client: AsyncClient):
    """Liveness endpoint returns 200."""
    response = await client.get("/health/live")

    assert response.status_code == 200
    assert response.json()["status"] == "alive"


async def test_readiness_endpoint(client: AsyncClient):
    """Readiness endpoint reports a reachable database."""
    response = await client.get("/health/ready")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"]["database"] == "ok"


async def test_info_endpoint(client: AsyncClient):
    """Info endpoint returns application metadata."""
    response = await client.get("/info")

    assert response.status_code == 200
    data = response.json()
    assert data["version"] == __version__
    assert "environment" in data


async def test_request_id_header(client: AsyncClient):
    """Every response carries the request id, echoing one the client sent."""
    response = await client.get("/health/live", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
