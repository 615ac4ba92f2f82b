"""Who may receive short-lived signed media URLs."""

from datetime import datetime, timezone
from typing import Any

MEMBER_SIGNED_URL_EXPIRES = 5 * 60


def _parse_datetime(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def is_admin(profile: dict[str, Any] | None) -> bool:
    return str((profile or {}).get("role") or "").strip().lower() == "admin"


def has_media_access(profile: dict[str, Any] | None, now: datetime | None = None) -> bool:
    """Admins, paid members, and members inside their grace period."""
    if is_admin(profile):
        return True

    profile = profile or {}
    if str(profile.get("membership_status") or "free").lower() == "paid":
        return True

    grace_until = _parse_datetime(profile.get("grace_until"))
    now = now or datetime.now(timezone.utc)
    return grace_until is not None and now < grace_until
