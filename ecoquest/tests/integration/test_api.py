"""Integration tests for API endpoints."""

import json
from unittest.mock import Mock

import pytest

from ecoquest.api import get_marker_service
from ecoquest.config import reset_settings
from ecoquest.repositories.memory_repository import InMemoryMarkerRepository
from ecoquest.services.marker_service import MarkerService

OAK = {"type": "TREE", "description": "Planted an oak", "lat": 22.5, "lng": 88.4, "user": "Ada"}


def _stored_markers(data_file):
    return json.loads(data_file.read_text(encoding="utf-8"))["markers"]


class TestHealthAPI:
    """Test liveness endpoint."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"] == "1.0.0"
        assert data["timestamp"].endswith("Z")


class TestStartup:
    """Test data file initialization on startup."""

    def test_startup_creates_empty_file(self, client, data_file):
        assert json.loads(data_file.read_text(encoding="utf-8")) == {"markers": []}

    def test_startup_seeds_samples_when_enabled(self, app_env, monkeypatch):
        from fastapi.testclient import TestClient
        from ecoquest.server import app

        monkeypatch.setenv("ECOQUEST_SEED_SAMPLES", "true")
        reset_settings()

        with TestClient(app) as client:
            markers = client.get("/markers").json()

        assert len(markers) == 3
        assert {m["type"] for m in markers} == {"tree", "cleanup", "school"}


class TestMarkerAPI:
    """Test marker CRUD endpoints."""

    def test_create_list_and_stats_scenario(self, client, data_file):
        response = client.post("/markers", json=OAK)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Marker created successfully"
        marker = body["marker"]
        assert marker["id"]
        assert marker["timestamp"]
        assert marker["type"] == "tree"
        assert marker["photoUrl"] is None
        assert "updatedAt" not in marker

        listed = client.get("/markers").json()
        assert listed == [marker]

        stats = client.get("/stats").json()
        assert stats["globalStats"]["trees"] == 1
        assert stats["globalStats"]["total"] == 1
        assert stats["userStats"]["Ada"]["total"] == 1
        assert stats["totalUsers"] == 1
        assert stats["totalMarkers"] == 1

        assert _stored_markers(data_file) == [marker]

    def test_create_invalid_latitude(self, client, data_file):
        response = client.post("/markers", json={**OAK, "lat": 999})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        assert "Latitude must be between -90 and 90" in body["details"]
        assert client.get("/markers").json() == []
        assert _stored_markers(data_file) == []

    def test_create_reports_every_violation(self, client):
        response = client.post("/markers", json={"type": "volcano"})

        assert response.status_code == 400
        assert len(response.json()["details"]) == 5

    def test_create_non_object_body(self, client):
        response = client.post("/markers", json=["not", "an", "object"])

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    def test_get_marker(self, client):
        created = client.post("/markers", json=OAK).json()["marker"]

        response = client.get(f"/markers/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_missing_marker(self, client):
        response = client.get("/markers/doesnotexist")

        assert response.status_code == 404
        assert response.json() == {"error": "Marker not found"}

    def test_list_filters(self, client):
        client.post("/markers", json=OAK)
        client.post("/markers", json={**OAK, "type": "cleanup", "user": "Grace"})
        client.post("/markers", json={**OAK, "type": "school", "user": "ada lovelace"})

        trees = client.get("/markers", params={"type": "tree"}).json()
        assert [m["type"] for m in trees] == ["tree"]

        by_user = client.get("/markers", params={"user": "ADA"}).json()
        assert sorted(m["user"] for m in by_user) == ["Ada", "ada lovelace"]

        limited = client.get("/markers", params={"limit": 2}).json()
        assert len(limited) == 2

    def test_list_invalid_limit(self, client):
        response = client.get("/markers", params={"limit": 0})

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    def test_update_marker(self, client, data_file):
        created = client.post("/markers", json=OAK).json()["marker"]

        response = client.put(
            f"/markers/{created['id']}",
            json={"description": "Planted two oaks", "id": "other", "timestamp": "1999"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Marker updated successfully"
        marker = body["marker"]
        assert marker["id"] == created["id"]
        assert marker["timestamp"] == created["timestamp"]
        assert marker["description"] == "Planted two oaks"
        assert marker["updatedAt"]
        assert _stored_markers(data_file) == [marker]

    def test_update_invalid(self, client):
        created = client.post("/markers", json=OAK).json()["marker"]

        response = client.put(f"/markers/{created['id']}", json={"lng": 500})

        assert response.status_code == 400
        assert response.json()["details"] == ["Longitude must be between -180 and 180"]
        assert client.get(f"/markers/{created['id']}").json() == created

    def test_update_missing_marker(self, client):
        response = client.put("/markers/doesnotexist", json={"description": "x"})

        assert response.status_code == 404
        assert response.json() == {"error": "Marker not found"}

    def test_delete_marker(self, client):
        created = client.post("/markers", json=OAK).json()["marker"]

        response = client.delete(f"/markers/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Marker deleted successfully"}

        again = client.delete(f"/markers/{created['id']}")
        assert again.status_code == 404
        assert again.json() == {"error": "Marker not found"}

    def test_delete_missing_marker(self, client):
        response = client.delete("/markers/doesnotexist")

        assert response.status_code == 404
        assert response.json() == {"error": "Marker not found"}


    def test_list_limit_clamped_to_configured_cap(self, client, monkeypatch):
        monkeypatch.setenv("ECOQUEST_MAX_LIST_LIMIT", "2")
        reset_settings()
        for user in ("Ada", "Grace", "Linus"):
            client.post("/markers", json={**OAK, "user": user})

        response = client.get("/markers", params={"limit": 50})

        assert response.status_code == 200
        assert len(response.json()) == 2
        assert len(client.get("/markers").json()) == 3

    def test_create_non_string_photo_reported_with_other_violations(self, client, data_file):
        response = client.post("/markers", json={**OAK, "user": "", "photoUrl": 123})

        assert response.status_code == 400
        assert response.json()["details"] == [
            "User is required and must be a non-empty string",
            "Photo URL must be a string or null",
        ]
        assert _stored_markers(data_file) == []


class TestDegradedDataFile:
    """Test stored entries that break marker rules are skipped, not served."""

    GOOD = {"id": "ok", "type": "tree", "description": "Oak", "lat": 1.0, "lng": 2.0,
            "user": "Ada", "photoUrl": None, "timestamp": "2026-01-01T00:00:00.000Z"}

    def _write(self, data_file, *entries):
        data_file.write_text(json.dumps({"markers": list(entries)}), encoding="utf-8")

    def test_null_user_entry_skipped(self, client, data_file):
        self._write(data_file, self.GOOD, {**self.GOOD, "id": "bad", "user": None})

        listed = client.get("/markers")
        assert listed.status_code == 200
        assert [m["id"] for m in listed.json()] == ["ok"]

        by_user = client.get("/markers", params={"user": "ada"})
        assert by_user.status_code == 200
        assert [m["id"] for m in by_user.json()] == ["ok"]

        stats = client.get("/stats")
        assert stats.status_code == 200
        assert stats.json()["totalMarkers"] == 1
        assert list(stats.json()["userStats"]) == ["Ada"]

        assert client.get("/markers/bad").status_code == 404

    def test_out_of_range_entry_skipped(self, client, data_file):
        self._write(data_file, {**self.GOOD, "id": "far", "lat": 999}, self.GOOD)

        listed = client.get("/markers").json()

        assert [m["lat"] for m in listed] == [1.0]


class TestErrorHandling:
    """Test storage failures, unknown routes and unhandled faults."""

    @pytest.fixture
    def failing_repo(self, client):
        from ecoquest.server import app

        repo = InMemoryMarkerRepository()
        repo.fail_writes = True
        app.dependency_overrides[get_marker_service] = lambda: MarkerService(repo)
        return repo

    def test_create_storage_failure(self, client, failing_repo):
        response = client.post("/markers", json=OAK)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to save marker"}

    def test_delete_not_found_before_storage(self, client, failing_repo):
        response = client.delete("/markers/anything")

        assert response.status_code == 404

    def test_unknown_route(self, client):
        response = client.get("/trees")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "Route not found"
        assert "GET /markers" in body["availableRoutes"]

    def _break_listing(self):
        from ecoquest.server import app

        broken = Mock()
        broken.list_markers.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_marker_service] = lambda: broken

    def test_unhandled_fault_hides_detail(self, client):
        self._break_listing()

        response = client.get("/markers")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "message": "Something went wrong",
        }

    def test_unhandled_fault_detail_in_development(self, client, monkeypatch):
        monkeypatch.setenv("ECOQUEST_ENV", "development")
        reset_settings()
        self._break_listing()

        response = client.get("/markers")

        assert response.status_code == 500
        assert response.json()["message"] == "boom"
