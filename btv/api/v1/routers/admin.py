from fastapi import APIRouter
from loguru import logger

from btv.api.v1.dependency import AdminUser, CurrentUser, Gateway
from btv.api.v1.schemas.admin import (
    LoadFromPublishedIn,
    LoadFromPublishedOut,
    NewsItemsIn,
    NewsItemsOut,
)
from btv.api.v1.schemas.base import ApiOut
from btv.shared.api.utils import ApiSuccess
from btv.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

router = APIRouter()

COPY_PUBLISHED_TO_DRAFT_RPC = "copy_published_to_draft_day"


@router.get("/news")
async def get_news(gateway: Gateway) -> ApiOut[NewsItemsOut]:
    """Ticker items. A store failure yields an empty ticker, not an error."""
    result = await gateway.get_news_items()
    if not result.ok:
        logger.warning("News items unavailable: {}", result.error)
        return ApiOut[NewsItemsOut](results=NewsItemsOut(items=[]))
    return ApiOut[NewsItemsOut](results=NewsItemsOut(items=result.data))


@router.post("/news")
async def save_news(payload: NewsItemsIn, user: AdminUser, gateway: Gateway) -> ApiSuccess:
    result = await gateway.save_news_items(payload.items, access_token=user.access_token)
    if not result.ok:
        raise AppError(
            errcode=AppErrorCode.E_REMOTE_STORE,
            errmesg=result.error or "Failed to save news items",
            status_code=HttpStatusCode.BAD_REQUEST,
        )
    return ApiSuccess(results="OK")


@router.post("/admin/scheduler/load-from-published")
async def load_from_published(
    payload: LoadFromPublishedIn, user: CurrentUser, gateway: Gateway
) -> ApiOut[LoadFromPublishedOut]:
    """Copy one day of the published schedule into the draft.

    The copy itself runs inside the remote store; its return value is the
    number of rows copied.
    """
    channel_id = "" if payload.channel_id is None else str(payload.channel_id).strip()
    if not channel_id or not payload.day:
        raise AppError(
            errcode=AppErrorCode.E_INVALID_REQUEST,
            errmesg="channelId and day are required",
            status_code=HttpStatusCode.BAD_REQUEST,
        )

    result = await gateway.rpc(
        COPY_PUBLISHED_TO_DRAFT_RPC,
        {"p_channel_id": channel_id, "p_day": payload.day},
        access_token=user.access_token,
    )
    if not result.ok:
        raise AppError(
            errcode=AppErrorCode.E_REMOTE_STORE,
            errmesg=result.error or "Schedule copy failed",
            status_code=HttpStatusCode.BAD_REQUEST,
        )

    copied = result.data
    if not isinstance(copied, int) or isinstance(copied, bool):
        copied = 0
    return ApiOut[LoadFromPublishedOut](results=LoadFromPublishedOut(ok=True, copied=copied))
