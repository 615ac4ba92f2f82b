"""Browser-local watch state: playback progress and favorite programs.

Everything here is keyed by plain strings in a localStorage-like store. Stored
values are JSON; anything that fails to decode is treated as absent.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any, Protocol

import orjson
from loguru import logger
from pydantic import BaseModel, Field

PROGRESS_KEY_PREFIX = "video_progress_"
FAVORITES_KEY = "favorite_programs"
# Written by the admin login page; named here so nothing else claims the key.
ADMIN_AUTH_KEY = "btv_admin_auth"


class LocalStore(Protocol):
    def keys(self) -> Iterable[str]: ...

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryLocalStore:
    """Dict-backed LocalStore, enumerated in insertion order."""

    def __init__(self, items: Mapping[str, str] | None = None):
        self._items: dict[str, str] = dict(items or {})

    def keys(self) -> list[str]:
        return list(self._items)

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class WatchProgress(BaseModel):
    position: float = Field(description="Playback position in seconds")
    duration: float | None = Field(default=None, description="Media duration in seconds")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def progress_key(video_source_id: str) -> str:
    return f"{PROGRESS_KEY_PREFIX}{video_source_id}"


def _decode(raw: str | None) -> Any | None:
    if raw is None:
        return None
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError:
        return None


class WatchStateStore:
    def __init__(self, store: LocalStore):
        self._store = store

    # ==================== PROGRESS ====================

    def get_progress(self, video_source_id: str) -> dict[str, Any] | None:
        """Stored progress payload, or None when absent or malformed."""
        payload = _decode(self._store.get_item(progress_key(video_source_id)))
        if not isinstance(payload, dict):
            if payload is not None:
                logger.debug("Ignoring non-object progress payload for {}", video_source_id)
            return None
        return payload

    def save_progress(
        self, video_source_id: str, payload: WatchProgress | Mapping[str, Any]
    ) -> None:
        """Replace the whole entry for the source id; no merging with the previous value."""
        if isinstance(payload, WatchProgress):
            data = payload.model_dump(mode="json")
        else:
            data = dict(payload)
        self._store.set_item(progress_key(video_source_id), orjson.dumps(data).decode())

    def clear_progress(self, video_source_id: str) -> None:
        self._store.remove_item(progress_key(video_source_id))

    def list_in_progress_video_ids(self) -> list[str]:
        """Source ids with a stored progress entry, in the store's own key order."""
        seen: set[str] = set()
        video_ids: list[str] = []
        for key in self._store.keys():
            if not key.startswith(PROGRESS_KEY_PREFIX):
                continue
            video_id = key[len(PROGRESS_KEY_PREFIX) :]
            if video_id not in seen:
                seen.add(video_id)
                video_ids.append(video_id)
        return video_ids

    # ==================== FAVORITES ====================

    def get_favorite_ids(self) -> list[str]:
        ids = _decode(self._store.get_item(FAVORITES_KEY))
        if not isinstance(ids, list):
            return []
        return [str(program_id) for program_id in ids]

    def is_favorited(self, program_id: str | int) -> bool:
        return str(program_id) in self.get_favorite_ids()

    def toggle_favorite(self, program_id: str | int) -> bool:
        """Add or remove a program from favorites. Returns True if it is now a favorite."""
        program_id = str(program_id)
        favorites = self.get_favorite_ids()
        if program_id in favorites:
            favorites = [fav for fav in favorites if fav != program_id]
            favorited = False
        else:
            favorites.append(program_id)
            favorited = True
        self._store.set_item(FAVORITES_KEY, orjson.dumps(favorites).decode())
        return favorited
