"""Thin async gateway over the hosted backend (PostgREST, storage and auth APIs).

Every operation returns a GatewayResult instead of raising on remote failure,
so callers can render a graceful message. Only configuration problems raise.

Usage:
    from btv.services.supabase_gateway import get_gateway

    result = await get_gateway().fetch_programs_by_ids(["12", "40"])
    if result.ok:
        programs = result.data
"""

from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import BaseModel

from btv.app_config import get_app_environ_config
from btv.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

DEFAULT_SIGNED_URL_EXPIRES = 6 * 60 * 60


class GatewayResult(BaseModel):
    ok: bool
    data: Any = None
    error: str | None = None

    @classmethod
    def success(cls, data: Any = None) -> "GatewayResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "GatewayResult":
        return cls(ok=False, error=error)


def _in_filter(values: list[str]) -> str:
    quoted = ",".join('"{}"'.format(str(v).replace('"', "")) for v in values)
    return f"in.({quoted})"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for field in ("message", "error_description", "error", "msg"):
            if body.get(field):
                return str(body[field])
    return f"HTTP {response.status_code}"


class SupabaseGateway:
    """Client for the remote relational store, object store and auth API.

    One instance per process is expected; see get_gateway().
    """

    instance_count = 0

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        service_role_key: str | None = None,
        *,
        timeout: float = 15,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not base_url or not anon_key:
            raise AppError(
                errcode=AppErrorCode.E_CONFIG,
                errmesg="Missing backend configuration: SUPABASE_URL or SUPABASE_ANON_KEY",
                status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
            )

        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.service_role_key = service_role_key
        self.timeout = timeout
        self._transport = transport

        SupabaseGateway.instance_count += 1
        if SupabaseGateway.instance_count > 1:
            logger.warning(
                "SupabaseGateway instantiated {} times; use get_gateway() to share one client",
                SupabaseGateway.instance_count,
            )

    def _build_headers(
        self,
        *,
        service_role: bool = False,
        access_token: str | None = None,
        extra: dict[str, str] | None = None,
    ) -> dict[str, str]:
        if service_role:
            if not self.service_role_key:
                raise AppError(
                    errcode=AppErrorCode.E_CONFIG,
                    errmesg="Missing SUPABASE_SERVICE_ROLE_KEY",
                    status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
                )
            key = self.service_role_key
            bearer = self.service_role_key
        else:
            key = self.anon_key
            bearer = access_token or self.anon_key

        headers = {
            "apikey": key,
            "Authorization": f"Bearer {bearer}",
            "Cache-Control": "no-cache",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str],
    ) -> GatewayResult:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Gateway {} {} failed: {}", method, path, e)
            return GatewayResult.failure(str(e) or type(e).__name__)

        if response.is_error:
            message = _error_message(response)
            logger.warning("Gateway {} {} -> {}: {}", method, path, response.status_code, message)
            return GatewayResult.failure(message)

        if not response.content:
            return GatewayResult.success(None)
        try:
            return GatewayResult.success(response.json())
        except ValueError:
            return GatewayResult.failure(f"Invalid JSON from {path}")

    # ==================== TABLES ====================

    async def select(
        self,
        table: str,
        filters: dict[str, str] | None = None,
        *,
        columns: str = "*",
        access_token: str | None = None,
    ) -> GatewayResult:
        params = {"select": columns}
        params.update(filters or {})
        return await self._request(
            "GET",
            f"/rest/v1/{table}",
            params=params,
            headers=self._build_headers(access_token=access_token),
        )

    async def fetch_programs_by_ids(self, ids: list[str]) -> GatewayResult:
        if not ids:
            return GatewayResult.success([])
        return await self.select("programs", {"id": _in_filter(ids)})

    async def fetch_programs(self) -> GatewayResult:
        return await self.select("programs")

    async def fetch_started_programs(
        self, channel_id: str, now: datetime, limit: int = 10
    ) -> GatewayResult:
        """Most recent programs of a channel whose start_time is not after `now`."""
        return await self.select(
            "programs",
            {
                "channel_id": f"eq.{channel_id}",
                "start_time": f"lte.{now.isoformat()}",
                "order": "start_time.desc",
                "limit": str(limit),
            },
        )

    async def fetch_role_for_user(
        self, user_id: str, access_token: str | None = None
    ) -> GatewayResult:
        """Role read through the caller's session so row-level policies apply."""
        result = await self.select(
            "user_profiles", {"id": f"eq.{user_id}"}, columns="role", access_token=access_token
        )
        if not result.ok:
            return result
        rows = result.data or []
        role = rows[0].get("role") if rows else None
        return GatewayResult.success(role)

    async def fetch_profile(self, user_id: str, access_token: str | None = None) -> GatewayResult:
        """Profile row used for media entitlement, or None when the user has no row."""
        result = await self.select(
            "user_profiles",
            {"id": f"eq.{user_id}"},
            columns="id,role,membership_status,grace_until",
            access_token=access_token,
        )
        if not result.ok:
            return result
        rows = result.data or []
        return GatewayResult.success(rows[0] if rows else None)

    async def get_news_items(self) -> GatewayResult:
        result = await self.select("site_news", {"key": "eq.global"}, columns="items")
        if not result.ok:
            return result
        rows = result.data or []
        items = rows[0].get("items") if rows else None
        return GatewayResult.success(list(items or []))

    async def save_news_items(self, items: list[str], access_token: str | None = None) -> GatewayResult:
        return await self._request(
            "POST",
            "/rest/v1/site_news",
            json={"key": "global", "items": items},
            headers=self._build_headers(
                access_token=access_token,
                extra={"Prefer": "resolution=merge-duplicates,return=minimal"},
            ),
        )

    # ==================== RPC ====================

    async def rpc(
        self, name: str, params: dict[str, Any], access_token: str | None = None
    ) -> GatewayResult:
        return await self._request(
            "POST",
            f"/rest/v1/rpc/{name}",
            json=params,
            headers=self._build_headers(access_token=access_token),
        )

    # ==================== AUTH ====================

    async def get_user(self, access_token: str) -> GatewayResult:
        return await self._request(
            "GET", "/auth/v1/user", headers=self._build_headers(access_token=access_token)
        )

    # ==================== STORAGE ====================

    async def create_signed_url(
        self, bucket: str, object_key: str, expires_in: int = DEFAULT_SIGNED_URL_EXPIRES
    ) -> GatewayResult:
        """Issue a time-limited URL. Requires the service-role key."""
        headers = self._build_headers(service_role=True)
        path = f"/storage/v1/object/sign/{quote(bucket)}/{quote(object_key.lstrip('/'))}"
        result = await self._request("POST", path, json={"expiresIn": expires_in}, headers=headers)
        if not result.ok:
            return result

        signed = (result.data or {}).get("signedURL") or (result.data or {}).get("signedUrl")
        if not signed:
            return GatewayResult.failure("Could not create signed URL")
        if signed.startswith("http"):
            return GatewayResult.success(signed)
        return GatewayResult.success(f"{self.base_url}/storage/v1/{signed.lstrip('/')}")


_gateway: SupabaseGateway | None = None


def get_gateway() -> SupabaseGateway:
    """Shared gateway, created on first use so imports never need configuration."""
    global _gateway
    if _gateway is None:
        cfg = get_app_environ_config()
        _gateway = SupabaseGateway(
            base_url=cfg.SUPABASE_URL,
            anon_key=cfg.SUPABASE_ANON_KEY or "",
            service_role_key=cfg.SUPABASE_SERVICE_ROLE_KEY,
            timeout=cfg.GATEWAY_TIMEOUT_SECONDS,
        )
    return _gateway
