"""Tests for request logging."""

import logging

import pytest
from httpx import ASGITransport, AsyncClient

from venty_auth.config import get_settings
from venty_auth.main import create_app
from venty_auth.middleware.request_logging import redacted_query


class TestRedactedQuery:
    """Tests for query string redaction."""

    def test_empty(self):
        assert redacted_query("") == ""

    def test_redacts_oauth_values(self):
        """Test codes and state never reach the log."""
        result = redacted_query("code=secret-code&state=/dashboard&prompt=none")

        assert "secret-code" not in result
        assert "dashboard" not in result
        assert "code=***" in result
        assert "prompt=none" in result


class TestRequestLoggingMiddleware:
    """Tests for the DEBUG_REQUESTS middleware."""

    @pytest.fixture
    def debug_app(self, settings):
        settings.debug_requests = True
        application = create_app(settings)
        application.dependency_overrides[get_settings] = lambda: settings
        yield application
        application.dependency_overrides.clear()

    @pytest.mark.asyncio
    async def test_echoes_request_id(self, debug_app, caplog):
        """Test an inbound request id is logged and returned."""
        caplog.set_level(logging.INFO, logger="venty_auth.middleware.request_logging")

        transport = ASGITransport(app=debug_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["x-request-id"] == "req-123"
        assert "[req-123]" in caplog.text
        assert "GET /health - 200" in caplog.text

    @pytest.mark.asyncio
    async def test_generates_request_id(self, debug_app):
        """Test a request without an id still gets one."""
        transport = ASGITransport(app=debug_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/health")

        assert len(response.headers["x-request-id"]) == 16

    @pytest.mark.asyncio
    async def test_disabled_by_default(self, client):
        """Test no request id header without DEBUG_REQUESTS."""
        response = await client.get("/health")

        assert "x-request-id" not in response.headers
