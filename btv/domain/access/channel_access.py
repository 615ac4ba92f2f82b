"""Channel access domain service."""

from collections.abc import Mapping

from loguru import logger
from pydantic import BaseModel

from btv.services.supabase_gateway import SupabaseGateway
from btv.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .access_proof import has_proof
from .protected_channels import is_protected, normalize_channel_key

VERIFY_PASSCODE_RPC = "verify_channel_passcode"


class ChannelAccessStatus(BaseModel):
    channel_key: str
    protected: bool
    allowed: bool


class ChannelAccessService:
    def __init__(self, gateway: SupabaseGateway):
        self._gateway = gateway

    @staticmethod
    def get_status(cookies: Mapping[str, str], channel_key: object) -> ChannelAccessStatus:
        key = normalize_channel_key(channel_key)
        protected = is_protected(key)
        return ChannelAccessStatus(
            channel_key=key,
            protected=protected,
            allowed=has_proof(cookies, key),
        )

    async def verify_passcode(
        self, channel_key: object, passcode: str, access_token: str | None = None
    ) -> bool:
        """Check a passcode against the remote store.

        Raises AppError when the remote store reports an error.
        """
        key = normalize_channel_key(channel_key)
        result = await self._gateway.rpc(
            VERIFY_PASSCODE_RPC,
            {"p_channel_key": key, "p_passcode": passcode},
            access_token=access_token,
        )
        if not result.ok:
            raise AppError(
                errcode=AppErrorCode.E_REMOTE_STORE,
                errmesg=result.error or "Passcode verification failed",
                status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
            )

        ok = bool(result.data)
        logger.info("Passcode check for channel {}: {}", key, "accepted" if ok else "rejected")
        return ok
