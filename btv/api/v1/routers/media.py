from fastapi import APIRouter, Query

from btv.api.v1.dependency import CurrentUser, Gateway
from btv.api.v1.schemas.admin import MediaSignedUrlIn, SignedUrlOut
from btv.api.v1.schemas.base import ApiOut
from btv.app_config import get_app_environ_config
from btv.domain.media.entitlement import MEMBER_SIGNED_URL_EXPIRES, has_media_access
from btv.services.supabase_gateway import SupabaseGateway
from btv.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

router = APIRouter()


async def _sign(
    gateway: SupabaseGateway, bucket: str, object_key: str, expires_in: int
) -> SignedUrlOut:
    result = await gateway.create_signed_url(bucket, object_key, expires_in=expires_in)
    if not result.ok:
        raise AppError(
            errcode=AppErrorCode.E_SIGNED_URL_FAILED,
            errmesg=result.error or "Could not create signed URL",
            status_code=HttpStatusCode.BAD_REQUEST,
        )
    return SignedUrlOut(url=result.data, expires_in=expires_in)


@router.get("/storage/sign")
async def storage_sign(
    user: CurrentUser,
    gateway: Gateway,
    bucket: str | None = Query(None),
    object_key: str | None = Query(None, alias="object"),
    expires: int | None = Query(None, gt=0, description="Lifetime in seconds"),
) -> ApiOut[SignedUrlOut]:
    """Signed URL for any object; defaults to a six-hour lifetime."""
    if not bucket or not object_key:
        raise AppError(
            errcode=AppErrorCode.E_INVALID_REQUEST,
            errmesg="bucket and object are required",
            status_code=HttpStatusCode.BAD_REQUEST,
        )

    expires_in = expires or get_app_environ_config().SIGNED_URL_DEFAULT_EXPIRES
    return ApiOut[SignedUrlOut](results=await _sign(gateway, bucket, object_key, expires_in))


@router.post("/media/signed-url")
async def media_signed_url(
    payload: MediaSignedUrlIn,
    user: CurrentUser,
    gateway: Gateway,
) -> ApiOut[SignedUrlOut]:
    """Short-lived signed URL for members with an active entitlement."""
    if not payload.bucket or not payload.path:
        raise AppError(
            errcode=AppErrorCode.E_INVALID_REQUEST,
            errmesg="Missing bucket/path",
            status_code=HttpStatusCode.BAD_REQUEST,
        )

    profile = await gateway.fetch_profile(user.user_id, access_token=user.access_token)
    if not profile.ok:
        raise AppError(
            errcode=AppErrorCode.E_REMOTE_STORE,
            errmesg=profile.error or "Could not load profile",
            status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
        )
    if not has_media_access(profile.data):
        raise AppError(
            errcode=AppErrorCode.E_PAYMENT_REQUIRED,
            errmesg="Payment required",
            status_code=HttpStatusCode.PAYMENT_REQUIRED,
        )

    signed = await _sign(gateway, payload.bucket, payload.path, MEMBER_SIGNED_URL_EXPIRES)
    return ApiOut[SignedUrlOut](results=signed)
