from typing import Annotated

from fastapi import Depends, Request
from loguru import logger
from pydantic import BaseModel

from btv.services.supabase_gateway import SupabaseGateway, get_gateway
from btv.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

ADMIN_ROLE = "admin"


class User(BaseModel):
    user_id: str
    access_token: str
    role: str | None = None


def get_access_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization") or ""
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    request: Request, gateway: SupabaseGateway = Depends(get_gateway)
) -> User:
    # Do not log request headers here (they carry the bearer token).
    access_token = get_access_token(request)
    if not access_token:
        raise AppError(
            errcode=AppErrorCode.E_NOT_AUTHENTICATED,
            errmesg="Not authenticated",
            status_code=HttpStatusCode.UNAUTHORIZED,
        )

    result = await gateway.get_user(access_token)
    user_id = (result.data or {}).get("id") if result.ok else None
    if not user_id:
        raise AppError(
            errcode=AppErrorCode.E_NOT_AUTHENTICATED,
            errmesg="Not authenticated",
            status_code=HttpStatusCode.UNAUTHORIZED,
        )

    logger.debug("Authenticated user_id: {}", user_id)
    return User(user_id=user_id, access_token=access_token)


async def get_admin_user(
    user: User = Depends(get_current_user), gateway: SupabaseGateway = Depends(get_gateway)
) -> User:
    result = await gateway.fetch_role_for_user(user.user_id, access_token=user.access_token)
    if not result.ok:
        raise AppError(
            errcode=AppErrorCode.E_REMOTE_STORE,
            errmesg=result.error or "Could not load user role",
            status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
        )

    role = str(result.data or "").strip().lower()
    if role != ADMIN_ROLE:
        raise AppError(
            errcode=AppErrorCode.E_FORBIDDEN,
            errmesg="Forbidden",
            status_code=HttpStatusCode.FORBIDDEN,
        )

    return user.model_copy(update={"role": role})


CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(get_admin_user)]
Gateway = Annotated[SupabaseGateway, Depends(get_gateway)]
