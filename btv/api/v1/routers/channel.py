from fastapi import APIRouter, Depends, Query, Request, Response

from btv.api.v1.dependency import Gateway, get_access_token
from btv.api.v1.schemas.base import ApiOut
from btv.api.v1.schemas.channel import (
    ChannelAccessIn,
    ChannelAccessOut,
    ChannelAccessStatusOut,
    PlaybackOut,
    ProtectedChannelsOut,
    StandbyOut,
)
from btv.domain.access.access_proof import grant_proof
from btv.domain.access.channel_access import ChannelAccessService
from btv.domain.access.playback import resolve_playback
from btv.domain.access.protected_channels import get_protected_channel_keys, normalize_channel_key
from btv.domain.media.storage_urls import standby_url_for
from btv.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

router = APIRouter()


def get_channel_access_service(gateway: Gateway) -> ChannelAccessService:
    return ChannelAccessService(gateway)


@router.get("/channel-access/protected")
async def list_protected_channels() -> ApiOut[ProtectedChannelsOut]:
    """Passcode-gated channel keys, for admin display."""
    return ApiOut[ProtectedChannelsOut](
        results=ProtectedChannelsOut(channel_keys=get_protected_channel_keys())
    )


@router.get("/channel-access/status")
async def channel_access_status(
    request: Request,
    channel_key: str = Query("", alias="channelKey", description="Channel identifier"),
) -> ApiOut[ChannelAccessStatusOut]:
    status = ChannelAccessService.get_status(request.cookies, channel_key)
    return ApiOut[ChannelAccessStatusOut](results=ChannelAccessStatusOut(**status.model_dump()))


@router.post("/channel-access")
async def unlock_channel(
    payload: ChannelAccessIn,
    request: Request,
    response: Response,
    service: ChannelAccessService = Depends(get_channel_access_service),
) -> ApiOut[ChannelAccessOut]:
    """Verify a channel passcode and, on success, set the unlock cookie."""
    channel_key = "" if payload.channel_key is None else str(payload.channel_key).strip()
    if not channel_key or not payload.passcode:
        raise AppError(
            errcode=AppErrorCode.E_INVALID_REQUEST,
            errmesg="channelKey and passcode are required",
            status_code=HttpStatusCode.BAD_REQUEST,
        )

    ok = await service.verify_passcode(
        channel_key, payload.passcode, access_token=get_access_token(request)
    )
    if ok:
        grant_proof(response, channel_key)

    return ApiOut[ChannelAccessOut](results=ChannelAccessOut(ok=ok))


@router.get("/channel/{channel_id}/playback")
async def channel_playback(
    channel_id: str,
    request: Request,
    gateway: Gateway,
) -> ApiOut[PlaybackOut]:
    """Resolve the URL to play: the live program, or standby when locked or empty."""
    source = await resolve_playback(channel_id, request.cookies, gateway)
    return ApiOut[PlaybackOut](results=PlaybackOut(**source.model_dump()))


@router.get("/channel/{channel_id}/standby")
async def channel_standby(channel_id: int) -> ApiOut[StandbyOut]:
    key = normalize_channel_key(channel_id)
    return ApiOut[StandbyOut](results=StandbyOut(channel_key=key, url=standby_url_for(key)))


