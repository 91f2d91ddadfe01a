"""API tests for application-level routes, middleware and error rendering."""

import pytest
from fastapi import status
from httpx import AsyncClient


class TestMainApp:
    """Test cases for the application factory wiring."""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient, test_engine):
        response = await client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["environment"] == "testing"
        assert data["services"] == {"database": "healthy"}

    @pytest.mark.asyncio
    async def test_root(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "Private Chat Console API"

    @pytest.mark.asyncio
    async def test_request_id_header(self, client: AsyncClient):
        response = await client.get("/")

        assert response.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_error_body_shape(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/api/chats/missing/settings")

        body = response.json()
        assert set(body) == {"status", "message", "error_code", "details", "timestamp", "request_id"}
        assert body["status"] == "error"
        assert body["message"] == "Chat not found"
        assert body["request_id"] == response.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_malformed_json_is_bad_request(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/login",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error_code"] == "VALIDATION_ERROR"
