"""Smoke tests for the assembled application."""

from fastapi.testclient import TestClient

from btv.main import app, build_granian_kwargs
from btv.shared.api.utils import get_all_routes_info


def test_health():
    client = TestClient(app)

    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["results"] == "OK"


def test_routers_are_loaded_under_api_prefix():
    paths = {route["path"] for route in get_all_routes_info(app)}

    assert "/api/v1/channel-access" in paths
    assert "/api/v1/channel-access/status" in paths
    assert "/api/v1/channel/{channel_id}/playback" in paths
    assert "/api/v1/library/favorites" in paths
    assert "/api/v1/news" in paths
    assert "/api/v1/admin/scheduler/load-from-published" in paths
    assert "/api/v1/storage/sign" in paths


def test_validation_errors_use_failure_envelope():
    client = TestClient(app)

    response = client.post(
        "/api/v1/channel-access",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 422
    data = response.json()
    assert data["success"] is False
    assert data["errcode"] == "E_INVALID_PARAMS"


def test_granian_kwargs():
    kwargs = build_granian_kwargs()

    assert kwargs["interface"] == "asgi"
    assert isinstance(kwargs["port"], int)
