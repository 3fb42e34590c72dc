"""API tests for the health endpoint."""

from httpx import AsyncClient


class TestHealthAPI:
    async def test_healthy_with_migrated_database(self, client: AsyncClient):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "ok"
        assert data["schema_version"] == 2

    async def test_response_headers(self, client: AsyncClient):
        response = await client.get("/api/health")
        assert response.headers["X-Request-ID"]
        assert response.headers["X-Response-Time"].endswith("ms")

    async def test_caller_request_id_is_echoed(self, client: AsyncClient):
        response = await client.get("/api/health", headers={"X-Request-ID": "trace-42"})
        assert response.headers["X-Request-ID"] == "trace-42"

    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get("/api/nowhere")
        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"
