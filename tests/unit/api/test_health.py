"""Tests for the health check endpoints."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from orderindex.adapters.memory.adapter import InMemoryIndexAdapter
from orderindex.api.app import create_app
from orderindex.config.settings import Settings
from orderindex.core.plugin import OrdersSearchPlugin
from orderindex.host.platform import CommercePlatform


@pytest.fixture
def client(settings: Settings, platform: CommercePlatform, remote: InMemoryIndexAdapter) -> Iterator[TestClient]:
    """Create a test client with the plugin loaded on the in-memory index."""
    plugin = OrdersSearchPlugin(settings, platform=platform, adapter=remote)
    with TestClient(create_app(settings, plugin=plugin)) as c:
        yield c


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client: TestClient) -> None:
        response = client.get("/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "orderindex"
        assert data["active_indices"] == ["orders"]
        assert "version" in data

    def test_index_health_check(self, client: TestClient) -> None:
        response = client.get("/v1/health/index")
        assert response.status_code == 200
        data = response.json()
        assert data["indices"]["orders"]["status"] == "healthy"

    def test_inactive_platform_has_no_indices(self, settings: Settings, platform: CommercePlatform) -> None:
        platform.active = False
        plugin = OrdersSearchPlugin(settings, platform=platform)
        with TestClient(create_app(settings, plugin=plugin)) as c:
            data = c.get("/v1/health").json()
        assert data["active_indices"] == []
