"""Decide which media URL a channel page should play."""

from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from loguru import logger
from pydantic import BaseModel

from btv.domain.media.storage_urls import channel_video_url, standby_url_for
from btv.services.supabase_gateway import SupabaseGateway

from .access_proof import has_proof
from .protected_channels import is_protected, normalize_channel_key


class PlaybackSource(BaseModel):
    channel_key: str
    url: str
    is_standby: bool
    locked: bool
    program: dict[str, Any] | None = None


def _parse_start(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        start = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    return start


def pick_current_program(programs: list[dict[str, Any]], now: datetime) -> dict[str, Any] | None:
    """Choose what is on air from programs sorted by start_time descending.

    The program whose [start, start + duration) window contains `now` wins;
    otherwise the most recent one with a media file; otherwise the most recent.
    """
    for program in programs:
        duration = program.get("duration")
        start = _parse_start(program.get("start_time"))
        if not isinstance(duration, (int, float)) or isinstance(duration, bool) or not duration:
            continue
        if start is None:
            continue
        if start <= now < start + timedelta(seconds=duration):
            return program

    for program in programs:
        if (program.get("mp4_url") or "").strip():
            return program

    return programs[0] if programs else None


async def resolve_playback(
    channel_id: int | str,
    cookies: Mapping[str, str],
    gateway: SupabaseGateway,
    now: datetime | None = None,
) -> PlaybackSource:
    key = normalize_channel_key(channel_id)
    standby_url = standby_url_for(key)

    if is_protected(key) and not has_proof(cookies, key):
        return PlaybackSource(channel_key=key, url=standby_url, is_standby=True, locked=True)

    now = now or datetime.now(timezone.utc)
    result = await gateway.fetch_started_programs(key, now)
    if not result.ok:
        logger.warning("Falling back to standby for channel {}: {}", key, result.error)
        return PlaybackSource(channel_key=key, url=standby_url, is_standby=True, locked=False)

    program = pick_current_program(result.data or [], now)
    if not program or not (program.get("mp4_url") or "").strip():
        return PlaybackSource(
            channel_key=key, url=standby_url, is_standby=True, locked=False, program=program
        )

    return PlaybackSource(
        channel_key=key,
        url=channel_video_url(key, program["mp4_url"]),
        is_standby=False,
        locked=False,
        program=program,
    )
