"""Tests for middleware functionality."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from shortbox.app import create_app


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    app = create_app()
    return TestClient(app)


def test_trace_id_header_added_to_response(client: TestClient) -> None:
    """Test that X-Trace-ID header is added to responses."""
    response = client.get("/api/")

    assert response.status_code == 200
    assert len(response.headers["X-Trace-ID"]) == 32  # UUID4 hex = 32 characters


def test_trace_id_header_preserved(client: TestClient) -> None:
    """Test that an incoming X-Trace-ID header is reused."""
    trace_id = "custom-trace-id-1234"

    response = client.get("/api/", headers={"X-Trace-ID": trace_id})

    assert response.headers["X-Trace-ID"] == trace_id
    assert response.json()["trace_id"] == trace_id


def test_trace_id_consistent_across_request(client: TestClient) -> None:
    """Test that the header and body carry the same trace id."""
    response = client.get("/api/health")

    assert response.headers["X-Trace-ID"] == response.json()["trace_id"]


def test_trace_id_different_for_each_request(client: TestClient) -> None:
    """Test that each request gets a different trace ID."""
    response1 = client.get("/api/")
    response2 = client.get("/api/")

    assert response1.headers["X-Trace-ID"] != response2.headers["X-Trace-ID"]


def test_trace_id_on_processing_routes(client: TestClient) -> None:
    """Test that API routes other than general ones are traced too."""
    response = client.post("/api/process", json={"path": "Saga 061 (2023).cbz"})

    assert response.status_code == 200
    assert "X-Trace-ID" in response.headers
