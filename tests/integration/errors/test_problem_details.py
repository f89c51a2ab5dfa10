"""Integration tests for RFC 7807 error responses."""

import pytest
from fastapi import APIRouter
from httpx import ASGITransport, AsyncClient

from journal.core.errors import ConflictError, ValidationError


pytestmark = pytest.mark.integration


error_router = APIRouter()


@error_router.get("/conflict")
async def raise_conflict():
    raise ConflictError("Already there", error_code="duplicate", details={"name": "x"})


@error_router.get("/invalid")
async def raise_validation():
    raise ValidationError(
        "Unknown permissions",
        errors=[{"field": "permissions", "message": "unknown token: foo.BAR"}],
    )


@error_router.get("/boom")
async def raise_unexpected():
    raise RuntimeError("database password is hunter2")


class TestProblemDetails:
    """Tests for the exception handlers."""

    @pytest.fixture
    async def error_client(self, app):
        app.include_router(error_router, prefix="/errors-test")
        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        ) as client:
            yield client

    async def test_app_exception(self, error_client):
        response = await error_client.get("/errors-test/conflict")

        assert response.status_code == 409
        body = response.json()
        assert body["type"].endswith("/errors/duplicate")
        assert body["detail"] == "Already there"
        assert body["instance"] == "/errors-test/conflict"
        assert body["name"] == "x"
        assert body["trace_id"] == response.headers["X-Request-ID"]

    async def test_business_validation_error(self, error_client):
        response = await error_client.get("/errors-test/invalid")

        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "permissions"

    async def test_unexpected_error_does_not_leak(self, error_client):
        response = await error_client.get("/errors-test/boom")

        assert response.status_code == 500
        assert "hunter2" not in response.text
        assert response.json()["detail"] == "An unexpected error occurred"
