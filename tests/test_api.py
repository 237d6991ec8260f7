"""Tests for FastAPI endpoints."""

import asyncio
import importlib
from unittest.mock import AsyncMock

from fastapi import Request
from fastapi.testclient import TestClient

from app.backend import main as main_module
from app.backend.config import Settings, get_settings
from app.backend.main import app
from app.backend.routers.classify import BATCH_FAILED_MESSAGE, NO_FILES_MESSAGE


def pdf_part(filename: str, content: bytes):
    return ("pdfFiles", (filename, content, "application/pdf"))


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_root_endpoint(self, client: TestClient):
        """Test root endpoint returns health status."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data

    def test_health_endpoint(self, client: TestClient):
        """Test /health endpoint returns health status."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"


class TestClassifyEndpoint:
    """Tests for POST /api/classify."""

    def test_classifies_batch_in_order(self, client: TestClient):
        """Test a mixed batch returns one row per file, in upload order."""
        response = client.post(
            "/api/classify",
            files=[
                pdf_part("web.pdf", b"%PDF-web"),
                pdf_part("broken.pdf", b"garbage"),
                pdf_part("plain.pdf", b"%PDF-nohead"),
            ],
            data={"model": "Nvidia-AI"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert [r["filename"] for r in data["results"]] == ["web.pdf", "broken.pdf", "plain.pdf"]

        web, broken, plain = data["results"]
        assert web == {
            "filename": "web.pdf",
            "category": "Web-application",
            "pagesProcessed": [2, 3],
            "success": True,
        }
        assert broken["success"] is False
        assert broken["category"] == "Error"
        assert broken["error"]
        assert plain["pagesProcessed"] == [1, 2, 3]

    def test_model_field_is_optional(self, client: TestClient, fake_ai_service):
        """Test that omitting the model uses the default entry."""
        response = client.post("/api/classify", files=[pdf_part("a.pdf", b"%PDF-mobile")])

        assert response.status_code == 200
        _, config = fake_ai_service.calls[0]
        assert config.id == "nvidia/nemotron-3-nano-30b-a3b:free"

    def test_no_files_is_client_error(self, client: TestClient, fake_pdf_service):
        """Test that a request without files fails before any processing."""
        response = client.post("/api/classify", data={"model": "Nvidia-AI"})

        assert response.status_code == 400
        assert response.json() == {"error": NO_FILES_MESSAGE}
        assert fake_pdf_service.calls == []

    def test_too_many_files_is_client_error(self, client: TestClient):
        response = client.post(
            "/api/classify",
            files=[pdf_part(f"{i}.pdf", b"%PDF-web") for i in range(21)],
        )

        assert response.status_code == 400
        assert "error" in response.json()

    def test_oversized_file_rejected(self, client: TestClient):
        app.dependency_overrides[get_settings] = lambda: Settings(max_file_size_bytes=4)

        response = client.post("/api/classify", files=[pdf_part("big.pdf", b"%PDF-web")])

        assert response.status_code == 413
        assert "big.pdf" in response.json()["error"]

    def test_thai_filename_preserved(self, client: TestClient):
        response = client.post(
            "/api/classify", files=[pdf_part("ระบบจองห้อง.pdf", b"%PDF-web")]
        )

        assert response.status_code == 200
        assert response.json()["results"][0]["filename"] == "ระบบจองห้อง.pdf"

    def test_orchestration_fault_is_server_error(self, client: TestClient, batch_classifier):
        batch_classifier.classify_batch = AsyncMock(side_effect=RuntimeError("boom"))

        response = client.post("/api/classify", files=[pdf_part("a.pdf", b"%PDF-web")])

        assert response.status_code == 500
        assert response.json() == {"error": BATCH_FAILED_MESSAGE}


class TestModelsEndpoint:
    """Tests for GET /api/models."""

    def test_lists_default_model(self, client: TestClient):
        response = client.get("/api/models")

        assert response.status_code == 200
        data = response.json()
        assert data["default"] == "Nvidia-AI"
        assert data["models"]["Nvidia-AI"]["temperature"] == 0.1


class TestCORS:
    """Tests for CORS configuration."""

    def test_cors_allows_vite_dev_server(self, client: TestClient):
        """Test that the Vite dev server origin is allowed."""
        response = client.get(
            "/health",
            headers={"Origin": "http://localhost:5173"},
        )
        assert response.status_code == 200
        assert (
            response.headers.get("access-control-allow-origin")
            == "http://localhost:5173"
        )


class TestClientDisconnect:
    """Tests for cancelling a batch when the client goes away."""

    def test_disconnect_cancels_remaining_documents(
        self, client: TestClient, fake_ai_service, monkeypatch
    ):
        watcher_tasks = []

        async def disconnected(self) -> bool:
            watcher_tasks.append(asyncio.current_task())
            return True

        monkeypatch.setattr(Request, "is_disconnected", disconnected)
        fake_ai_service.delay = 0.2

        response = client.post(
            "/api/classify",
            files=[
                pdf_part("1.pdf", b"%PDF-web"),
                pdf_part("2.pdf", b"%PDF-mobile"),
                pdf_part("3.pdf", b"%PDF-nohead"),
            ],
        )

        assert response.status_code == 200
        first, *rest = response.json()["results"]
        assert first["success"] is True
        assert len(rest) == 2
        assert all(row["category"] == "Error" for row in rest)
        assert all("cancelled" in row["error"] for row in rest)
        assert len(fake_ai_service.calls) == 1
        assert watcher_tasks and all(task.done() for task in watcher_tasks)

    def test_watcher_stopped_after_batch(self, client: TestClient, monkeypatch):
        watcher_tasks = []

        async def connected(self) -> bool:
            watcher_tasks.append(asyncio.current_task())
            return False

        monkeypatch.setattr(Request, "is_disconnected", connected)

        response = client.post(
            "/api/classify",
            files=[pdf_part("1.pdf", b"%PDF-web"), pdf_part("2.pdf", b"%PDF-mobile")],
        )

        assert response.status_code == 200
        assert all(row["success"] for row in response.json()["results"])
        assert watcher_tasks
        assert all(task.cancelled() for task in watcher_tasks)


class TestDebugSetting:
    """Tests for the DEBUG setting."""

    def test_app_follows_settings(self):
        assert app.debug is get_settings().debug

    def test_debug_env_enables_debug_app(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "true")
        get_settings.cache_clear()
        try:
            reloaded = importlib.reload(main_module)
            assert reloaded.app.debug is True
        finally:
            monkeypatch.delenv("DEBUG")
            get_settings.cache_clear()
            importlib.reload(main_module)
