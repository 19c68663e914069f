"""
Integration tests for health check endpoints.
"""

import pytest
from httpx import AsyncClient

from pasteit.main import app


class TestHealth:
    """Test liveness and readiness checks."""

    @pytest.mark.asyncio
    async def test_liveness(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, async_client: AsyncClient):
        response = await async_client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    @pytest.mark.asyncio
    async def test_readiness(self, async_client: AsyncClient):
        response = await async_client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["database"] == "ok"

    @pytest.mark.asyncio
    async def test_readiness_without_database(self, async_client: AsyncClient):
        app.state.sessionmaker = None

        response = await async_client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"
