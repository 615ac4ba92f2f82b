"""Public object-storage URL helpers.

    standby_url_for(21)
    # -> https://<project>.supabase.co/storage/v1/object/public/channel21/standby_blacktruthtv.mp4
"""

import re
from urllib.parse import urlsplit

from pydantic import BaseModel

from btv.app_config import get_app_environ_config

STANDBY_OBJECT_KEY = "standby_blacktruthtv.mp4"
PUBLIC_OBJECT_PATH = "storage/v1/object/public"

_STORAGE_ROOT = get_app_environ_config().SUPABASE_URL.rstrip("/")


class StorageLocation(BaseModel):
    bucket: str
    path: str


def normalize_object_key(key: str) -> str:
    clean = re.sub(r"^\.?/", "", key, count=1)
    clean = clean.replace("\\", "/")
    return re.sub(r"/{2,}", "/", clean)


def channel_bucket(channel_id: int | str) -> str:
    return f"channel{channel_id}"


def public_object_url(bucket: str, key: str, root: str | None = None) -> str:
    base = _STORAGE_ROOT if root is None else root.rstrip("/")
    return f"{base}/{PUBLIC_OBJECT_PATH}/{bucket}/{normalize_object_key(key)}"


def standby_url_for(channel_id: int | str, root: str | None = None) -> str:
    """Fallback media URL for a channel.

    An empty root yields a path-only URL rather than an error; reachability is
    the player's concern.
    """
    return public_object_url(channel_bucket(channel_id), STANDBY_OBJECT_KEY, root=root)


def collapse_slashes(url: str) -> str:
    """Collapse duplicate slashes while keeping an http(s) scheme intact."""
    if not url:
        return ""

    match = re.match(r"^https?://", url, flags=re.IGNORECASE)
    scheme = match.group(0) if match else ""
    return scheme + re.sub(r"/+", "/", url[len(scheme) :])


def channel_video_url(channel_id: int | str, file_name: str, root: str | None = None) -> str:
    if re.match(r"^https?://", file_name or "", flags=re.IGNORECASE):
        return collapse_slashes(file_name)
    return collapse_slashes(
        public_object_url(channel_bucket(channel_id), (file_name or "").lstrip("/"), root=root)
    )


def parse_storage_url(url: str) -> StorageLocation | None:
    """Split `.../storage/v1/object/<public|sign>/<bucket>/<path>` into its parts."""
    if not isinstance(url, str):
        return None
    try:
        split = urlsplit(url)
    except ValueError:
        return None
    if not split.scheme or not split.netloc:
        return None

    parts = [part for part in split.path.split("/") if part]
    if "object" not in parts:
        return None

    index = parts.index("object")
    bucket = parts[index + 2] if len(parts) > index + 2 else ""
    path = "/".join(parts[index + 3 :])
    if not bucket or not path:
        return None
    return StorageLocation(bucket=bucket, path=path)
