"""Tests for settings API routes."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from shortbox.app import create_app
from shortbox.core.config import get_settings
from shortbox.core.matching import get_matching_config


@pytest.fixture
def client() -> TestClient:
    """Create test client with the per-test data directory."""
    app = create_app()
    return TestClient(app)


def _settings_file(data_dir: Path) -> dict:
    return json.loads((data_dir / "config" / "settings.json").read_text())


def test_get_processing_settings_defaults(client: TestClient) -> None:
    """Test getting processing settings with defaults."""
    response = client.get("/api/settings/processing")
    assert response.status_code == 200
    data = response.json()

    assert data["batch_item_delay_seconds"] == 0.0
    assert data["detect_publishers"] is True
    assert data["scraper_source"] == "mock"
    assert data["comicvine_api_key_set"] is False
    assert "comicvine_api_key" not in data
    assert data["marvel_keys_set"] is False
    assert "trace_id" in data


def test_update_processing_settings(client: TestClient, data_dir: Path) -> None:
    """Test updating processing settings persists and reloads them."""
    payload = {"detect_publishers": False, "comicvine_api_key": "0123456789abcdef"}

    response = client.put("/api/settings/processing", json=payload)
    assert response.status_code == 200
    data = response.json()

    assert data["detect_publishers"] is False
    assert data["comicvine_api_key_set"] is True
    assert "comicvine_api_key" not in data

    assert _settings_file(data_dir)["detect_publishers"] is False
    assert get_settings().comicvine_api_key == "0123456789abcdef"


def test_marvel_keys_need_both_halves(client: TestClient) -> None:
    """Test the Marvel key pair only counts as set once both keys are stored."""
    first = client.put("/api/settings/processing", json={"marvel_public_key": "public"}).json()
    second = client.put("/api/settings/processing", json={"marvel_private_key": "private"}).json()

    assert first["marvel_keys_set"] is False
    assert second["marvel_keys_set"] is True
    assert "marvel_private_key" not in second


def test_update_processing_settings_empty(client: TestClient) -> None:
    """Test an empty update is rejected."""
    response = client.put("/api/settings/processing", json={})
    assert response.status_code == 400


def test_update_processing_settings_validation(client: TestClient) -> None:
    """Test invalid values are rejected."""
    response = client.put("/api/settings/processing", json={"scraper_source": "elsewhere"})
    assert response.status_code == 422

    response = client.put("/api/settings/processing", json={"batch_item_delay_seconds": -1})
    assert response.status_code == 422


def test_get_matching_settings(client: TestClient) -> None:
    """Test the effective matching configuration is returned."""
    response = client.get("/api/settings/matching")
    assert response.status_code == 200
    data = response.json()

    assert data["series_weight"] == 0.7
    assert data["high_confidence_threshold"] == 0.85
    assert data["max_results"] == 5


def test_update_matching_settings(client: TestClient, data_dir: Path) -> None:
    """Test matching updates are merged and take effect immediately."""
    client.put("/api/settings/matching", json={"max_results": 3})
    response = client.put("/api/settings/matching", json={"high_confidence_threshold": 0.9})

    assert response.status_code == 200
    assert response.json()["max_results"] == 3
    assert response.json()["high_confidence_threshold"] == 0.9

    assert _settings_file(data_dir)["matching"] == {"max_results": 3, "high_confidence_threshold": 0.9}
    assert get_matching_config().max_results == 3


def test_matching_update_changes_processing(client: TestClient) -> None:
    """Test a raised threshold changes the confidence of later results."""
    before = client.post("/api/process", json={"path": "Saga #1 (2012).cbz"}).json()
    assert before["confidence"] == "High"

    client.put(
        "/api/settings/matching",
        json={"high_confidence_threshold": 1.0, "medium_confidence_threshold": 0.9},
    )
    capped = client.post("/api/process", json={"path": "Saga #1 (2012).cbz"}).json()

    assert capped["confidence"] == "Medium"


def test_update_matching_settings_rejects_zero_weights(client: TestClient) -> None:
    """Test both weights cannot be zero."""
    response = client.put("/api/settings/matching", json={"series_weight": 0, "volume_weight": 0})
    assert response.status_code == 400


def test_update_matching_settings_empty(client: TestClient) -> None:
    """Test an empty update is rejected."""
    response = client.put("/api/settings/matching", json={})
    assert response.status_code == 400


def test_update_matching_settings_replaces_invalid_stored_section(
    client: TestClient, data_dir: Path
) -> None:
    """Test a stored matching section with bad values is discarded on update."""
    settings_path = data_dir / "config" / "settings.json"
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings_path.write_text(json.dumps({"matching": {"series_weight": "heavy"}}))

    response = client.put("/api/settings/matching", json={"max_results": 2})

    assert response.status_code == 200
    assert response.json()["series_weight"] == 0.7
    assert _settings_file(data_dir)["matching"] == {"max_results": 2}


def test_app_starts_with_invalid_matching_settings(data_dir: Path) -> None:
    """Test the app starts and serves defaults when settings.json is not an object."""
    settings_path = data_dir / "config" / "settings.json"
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings_path.write_text("[1, 2]")

    response = TestClient(create_app()).get("/api/settings/matching")

    assert response.status_code == 200
    assert response.json()["max_results"] == 5
