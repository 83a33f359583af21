"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

# Add repo root for imports - do this before other imports
repo_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(repo_root))

import pytest
from fastapi.testclient import TestClient

from ecoquest.config import reset_settings
from ecoquest.models.domain import Marker, MarkerCollection, MarkerType


def _reset_api_singletons():
    import ecoquest.api as api_module
    api_module._marker_repo = None
    api_module._marker_service = None


@pytest.fixture
def data_file(tmp_path):
    """Path of a backing file inside a per-test temporary directory."""
    return tmp_path / "markers.json"


@pytest.fixture
def app_env(data_file, monkeypatch):
    """Point the app at a temporary data file with production defaults."""
    monkeypatch.setenv("ECOQUEST_DATA_FILE", str(data_file))
    monkeypatch.setenv("ECOQUEST_ENV", "production")
    monkeypatch.delenv("ECOQUEST_SEED_SAMPLES", raising=False)
    monkeypatch.delenv("ECOQUEST_MAX_LIST_LIMIT", raising=False)
    reset_settings()
    _reset_api_singletons()

    yield data_file

    reset_settings()
    _reset_api_singletons()


@pytest.fixture
def client(app_env):
    """Test client with lifespan run, so the data file is initialized."""
    from ecoquest.server import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def make_marker(**overrides) -> Marker:
    """Build a valid marker, overriding any field."""
    fields = dict(
        id="m1",
        type=MarkerType.TREE,
        description="Planted an oak",
        lat=22.5,
        lng=88.4,
        user="Ada",
        photo_url=None,
        timestamp="2026-01-01T10:00:00.000Z",
    )
    fields.update(overrides)
    return Marker(**fields)


@pytest.fixture
def marker_factory():
    """Factory for valid markers with per-test overrides."""
    return make_marker


@pytest.fixture
def sample_collection():
    """Three markers by two users, stored oldest first."""
    return MarkerCollection(markers=[
        make_marker(id="a", type=MarkerType.TREE, user="Ada",
                    timestamp="2026-01-01T10:00:00.000Z"),
        make_marker(id="b", type=MarkerType.CLEANUP, user="Grace Hopper",
                    description="Beach cleanup", timestamp="2026-01-03T10:00:00.000Z"),
        make_marker(id="c", type=MarkerType.TREE, user="ada lovelace",
                    description="Planted a maple", timestamp="2026-01-02T10:00:00.000Z"),
    ])
