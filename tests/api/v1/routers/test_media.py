"""Unit tests for signed URL endpoints."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from btv.api.errors import app_error_handler
from btv.api.v1.dependency import User, get_current_user
from btv.api.v1.routers.media import router
from btv.domain.media.entitlement import MEMBER_SIGNED_URL_EXPIRES
from btv.services.supabase_gateway import GatewayResult, get_gateway
from btv.utils.app_errors import AppError

SIGNED = "https://example.supabase.co/storage/v1/object/sign/channel21/a.mp4?token=t"


@pytest.fixture
def client(mock_gateway: AsyncMock) -> TestClient:
    app = FastAPI()
    app.dependency_overrides[get_gateway] = lambda: mock_gateway
    app.dependency_overrides[get_current_user] = lambda: User(
        user_id="user_1", access_token="user-jwt"
    )
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.include_router(router)
    return TestClient(app)


class TestStorageSign:
    def test_default_expiry(self, client: TestClient, mock_gateway: AsyncMock):
        mock_gateway.create_signed_url.return_value = GatewayResult.success(SIGNED)

        response = client.get("/storage/sign", params={"bucket": "channel21", "object": "a.mp4"})

        assert response.status_code == 200
        assert response.json()["results"] == {"url": SIGNED, "expires_in": 21600}
        mock_gateway.create_signed_url.assert_awaited_once_with(
            "channel21", "a.mp4", expires_in=21600
        )

    def test_custom_expiry(self, client: TestClient, mock_gateway: AsyncMock):
        mock_gateway.create_signed_url.return_value = GatewayResult.success(SIGNED)

        response = client.get(
            "/storage/sign", params={"bucket": "channel21", "object": "a.mp4", "expires": 60}
        )

        assert response.json()["results"]["expires_in"] == 60

    @pytest.mark.parametrize("params", [{}, {"bucket": "channel21"}, {"object": "a.mp4"}])
    def test_missing_params(self, client: TestClient, mock_gateway: AsyncMock, params):
        response = client.get("/storage/sign", params=params)

        assert response.status_code == 400
        mock_gateway.create_signed_url.assert_not_called()

    def test_sign_failure(self, client: TestClient, mock_gateway: AsyncMock):
        mock_gateway.create_signed_url.return_value = GatewayResult.failure("Object not found")

        response = client.get("/storage/sign", params={"bucket": "channel21", "object": "x.mp4"})

        assert response.status_code == 400
        assert response.json()["errcode"] == "E_SIGNED_URL_FAILED"


class TestMediaSignedUrl:
    def test_paid_member(self, client: TestClient, mock_gateway: AsyncMock):
        mock_gateway.fetch_profile.return_value = GatewayResult.success(
            {"id": "user_1", "membership_status": "paid"}
        )
        mock_gateway.create_signed_url.return_value = GatewayResult.success(SIGNED)

        response = client.post("/media/signed-url", json={"bucket": "channel21", "path": "a.mp4"})

        assert response.status_code == 200
        assert response.json()["results"]["expires_in"] == MEMBER_SIGNED_URL_EXPIRES
        mock_gateway.create_signed_url.assert_awaited_once_with(
            "channel21", "a.mp4", expires_in=MEMBER_SIGNED_URL_EXPIRES
        )

    def test_free_member_needs_payment(self, client: TestClient, mock_gateway: AsyncMock):
        mock_gateway.fetch_profile.return_value = GatewayResult.success(
            {"id": "user_1", "membership_status": "free"}
        )

        response = client.post("/media/signed-url", json={"bucket": "channel21", "path": "a.mp4"})

        assert response.status_code == 402
        mock_gateway.create_signed_url.assert_not_called()

    def test_missing_fields(self, client: TestClient):
        response = client.post("/media/signed-url", json={"bucket": "channel21"})

        assert response.status_code == 400
