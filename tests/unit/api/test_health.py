"""Tests for health and metrics endpoints."""

from fastapi.testclient import TestClient

from gdrive_mcp.bootstrap import ServerComponents
from tests.factories import open_idle_session


class TestHealth:
    """Tests for GET /health."""

    def test_health_check(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "mcp-gdrive", "sessions": 0}

    def test_counts_open_sessions(self, client: TestClient, components: ServerComponents) -> None:
        open_idle_session(components)
        open_idle_session(components)

        assert client.get("/health").json()["sessions"] == 2

    def test_request_id_header(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.headers["X-Request-ID"]


class TestMetrics:
    """Tests for the Prometheus endpoint."""

    def test_exposes_server_metrics(self, client: TestClient) -> None:
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "mcp_gdrive_active_sessions" in response.text
