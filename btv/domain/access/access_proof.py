"""Per-channel proof of unlock, carried as an httpOnly cookie.

Readers receive the request's cookie mapping explicitly so the check can run
anywhere a credential set is observable without touching ambient request state.
"""

from collections.abc import Mapping

from fastapi import Response

from btv.app_config import get_app_environ_config

from .protected_channels import normalize_channel_key

COOKIE_PREFIX = "channel_unlocked_"
COOKIE_MAX_AGE = 60 * 60 * 12
PROOF_VALUE = "1"


def proof_cookie_name(channel_key: object) -> str:
    return f"{COOKIE_PREFIX}{normalize_channel_key(channel_key)}"


def has_proof(cookies: Mapping[str, str] | None, channel_key: object) -> bool:
    """True only when the channel's proof cookie holds exactly "1"."""
    if not cookies:
        return False
    return cookies.get(proof_cookie_name(channel_key)) == PROOF_VALUE


def grant_proof(response: Response, channel_key: object) -> None:
    response.set_cookie(
        key=proof_cookie_name(channel_key),
        value=PROOF_VALUE,
        max_age=COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        secure=get_app_environ_config().CHANNEL_COOKIE_SECURE,
        samesite="lax",
    )
