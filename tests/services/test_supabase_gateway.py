"""Tests for SupabaseGateway against a mocked HTTP transport."""

from datetime import datetime, timezone

import httpx
import orjson
import pytest

import btv.services.supabase_gateway as gateway_mod
from btv.services.supabase_gateway import SupabaseGateway, get_gateway
from btv.utils.app_errors import AppError, AppErrorCode


class TestConstruction:
    def test_missing_configuration_is_an_error(self):
        with pytest.raises(AppError) as exc_info:
            SupabaseGateway(base_url="", anon_key="anon")

        assert exc_info.value.errcode == AppErrorCode.E_CONFIG
        assert exc_info.value.status_code == 500

    def test_extra_instances_are_counted(self, gateway_factory):
        before = SupabaseGateway.instance_count
        gateway_factory(lambda request: httpx.Response(200))
        gateway_factory(lambda request: httpx.Response(200))

        assert SupabaseGateway.instance_count == before + 2

    def test_get_gateway_is_shared(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(gateway_mod, "_gateway", None)

        assert get_gateway() is get_gateway()


class TestSelect:
    async def test_fetch_programs_by_ids_uses_in_filter(self, gateway_factory):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"id": 1}, {"id": 2}])

        gateway = gateway_factory(handler)
        result = await gateway.fetch_programs_by_ids(["1", "2"])

        assert result.ok is True
        assert result.data == [{"id": 1}, {"id": 2}]
        request = seen[0]
        assert request.url.path == "/rest/v1/programs"
        assert request.url.params["id"] == 'in.("1","2")'
        assert request.url.params["select"] == "*"
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["authorization"] == "Bearer anon-key"

    async def test_fetch_programs_by_ids_empty_makes_no_request(self, gateway_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        result = await gateway_factory(handler).fetch_programs_by_ids([])

        assert result.ok is True
        assert result.data == []

    async def test_fetch_started_programs_filters(self, gateway_factory):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        now = datetime(2025, 1, 1, 12, tzinfo=timezone.utc)
        await gateway_factory(handler).fetch_started_programs("21", now)

        params = seen[0].url.params
        assert params["channel_id"] == "eq.21"
        assert params["start_time"] == f"lte.{now.isoformat()}"
        assert params["order"] == "start_time.desc"
        assert params["limit"] == "10"

    async def test_http_error_becomes_failure(self, gateway_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"message": "JWT expired"})

        result = await gateway_factory(handler).fetch_programs()

        assert result.ok is False
        assert result.error == "JWT expired"

    async def test_transport_error_becomes_failure(self, gateway_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = await gateway_factory(handler).fetch_programs()

        assert result.ok is False
        assert "connection refused" in result.error

    async def test_fetch_role_for_user(self, gateway_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["id"] == "eq.user-1"
            assert request.url.params["select"] == "role"
            return httpx.Response(200, json=[{"role": "admin"}])

        result = await gateway_factory(handler).fetch_role_for_user("user-1")

        assert result.ok is True
        assert result.data == "admin"

    async def test_fetch_role_for_unknown_user(self, gateway_factory):
        result = await gateway_factory(lambda r: httpx.Response(200, json=[])).fetch_role_for_user(
            "nobody"
        )

        assert result.ok is True
        assert result.data is None

    async def test_fetch_role_uses_caller_token(self, gateway_factory):
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["authorization"] = request.headers["Authorization"]
            seen["apikey"] = request.headers["apikey"]
            return httpx.Response(200, json=[{"role": "admin"}])

        result = await gateway_factory(handler).fetch_role_for_user(
            "user-1", access_token="user-jwt"
        )

        assert result.data == "admin"
        assert seen == {"authorization": "Bearer user-jwt", "apikey": "anon-key"}


class TestNews:
    async def test_get_news_items(self, gateway_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["key"] == "eq.global"
            return httpx.Response(200, json=[{"items": ["a", "b"]}])

        result = await gateway_factory(handler).get_news_items()

        assert result.data == ["a", "b"]

    async def test_get_news_items_without_row(self, gateway_factory):
        result = await gateway_factory(lambda r: httpx.Response(200, json=[])).get_news_items()

        assert result.ok is True
        assert result.data == []

    async def test_save_news_items_upserts_with_user_token(self, gateway_factory):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201)

        result = await gateway_factory(handler).save_news_items(["x"], access_token="user-jwt")

        assert result.ok is True
        request = seen[0]
        assert request.method == "POST"
        assert orjson.loads(request.content) == {"key": "global", "items": ["x"]}
        assert request.headers["authorization"] == "Bearer user-jwt"
        assert "resolution=merge-duplicates" in request.headers["prefer"]


class TestRpcAndAuth:
    async def test_rpc_posts_params(self, gateway_factory):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=True)

        result = await gateway_factory(handler).rpc(
            "verify_channel_passcode", {"p_channel_key": "23", "p_passcode": "x"}
        )

        assert result.ok is True
        assert result.data is True
        assert seen[0].url.path == "/rest/v1/rpc/verify_channel_passcode"
        assert orjson.loads(seen[0].content) == {"p_channel_key": "23", "p_passcode": "x"}

    async def test_get_user(self, gateway_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/auth/v1/user"
            assert request.headers["authorization"] == "Bearer user-jwt"
            return httpx.Response(200, json={"id": "user-1"})

        result = await gateway_factory(handler).get_user("user-jwt")

        assert result.data == {"id": "user-1"}


class TestCreateSignedUrl:
    async def test_signed_url_uses_service_role(self, gateway_factory):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200, json={"signedURL": "/object/sign/channel21/a.mp4?token=t"}
            )

        result = await gateway_factory(handler).create_signed_url("channel21", "/a.mp4")

        assert result.ok is True
        assert result.data == "https://example.supabase.co/storage/v1/object/sign/channel21/a.mp4?token=t"
        request = seen[0]
        assert request.url.path == "/storage/v1/object/sign/channel21/a.mp4"
        assert request.headers["authorization"] == "Bearer service-key"
        assert orjson.loads(request.content) == {"expiresIn": 21600}

    async def test_missing_service_role_key_is_config_error(self, gateway_factory):
        gateway = gateway_factory(lambda r: httpx.Response(200), service_role_key=None)

        with pytest.raises(AppError) as exc_info:
            await gateway.create_signed_url("channel21", "a.mp4")

        assert exc_info.value.errcode == AppErrorCode.E_CONFIG

    async def test_storage_error_is_failure(self, gateway_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "Object not found"})

        result = await gateway_factory(handler).create_signed_url("channel21", "missing.mp4")

        assert result.ok is False
        assert result.error == "Object not found"
