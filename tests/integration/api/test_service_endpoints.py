"""
Integration tests for storage, health and metrics endpoints.
"""

from pathlib import Path

from fastapi.testclient import TestClient

from src.logshelf.config import Settings, StorageSettings
from src.logshelf.main import create_app

MIB = 1024 * 1024


class TestStorageEndpoint:
    """Test GET /api/storage."""

    def test_empty_store(self, test_client: TestClient) -> None:
        response = test_client.get("/api/storage")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "freeSpace": 500.0,
            "totalSize": 0.0,
            "maxSize": 500.0,
            "fileCount": 0,
            "unit": "MB",
        }

    def test_usage_reflects_stored_logs(self, test_client: TestClient) -> None:
        test_client.post("/api/logs", json={"data": "x" * (MIB // 2)})

        data = test_client.get("/api/storage").json()

        assert data["totalSize"] == 0.5
        assert data["freeSpace"] == 499.5
        assert data["fileCount"] == 1


class TestHealthEndpoints:
    """Test liveness and readiness probes."""

    def test_health(self, test_client: TestClient) -> None:
        response = test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert data["timestamp"].endswith("Z")

    def test_ready_with_room(self, test_client: TestClient) -> None:
        response = test_client.get("/readyz")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["checks"] == {"storage_writable": True, "free_space": True}

    def test_not_ready_when_full(self, temp_storage_dir: Path) -> None:
        settings = Settings(
            storage=StorageSettings(
                root_path=temp_storage_dir,
                quota_bytes=10 * MIB + 10,
                min_free_bytes=10 * MIB,
            )
        )

        with TestClient(create_app(settings)) as client:
            client.post("/api/logs", json={"message": "fills the remaining room"})

            response = client.get("/readyz")

            assert response.status_code == 503
            assert response.json()["failed_checks"] == ["free_space"]


class TestServiceInfo:
    """Test root, metrics and CORS behaviour."""

    def test_root(self, test_client: TestClient) -> None:
        data = test_client.get("/").json()

        assert data["service"] == "LogShelf"
        assert data["docs"] == "/docs"

    def test_metrics_exposed(self, test_client: TestClient) -> None:
        test_client.post("/api/logs", json={"a": 1})

        response = test_client.get("/metrics")

        assert response.status_code == 200
        assert "logs_ingested_total 1.0" in response.text
        assert "storage_log_files 1.0" in response.text

    def test_cors_allows_any_origin(self, test_client: TestClient) -> None:
        response = test_client.options(
            "/api/logs",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
