"""Favorites and continue-watching views hydrated from the remote store."""

from typing import Any

from pydantic import BaseModel

from btv.domain.media.storage_urls import channel_video_url
from btv.services.supabase_gateway import SupabaseGateway
from btv.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

NO_FAVORITES_MESSAGE = "No favorites yet."
NO_PROGRESS_MESSAGE = "No videos in progress."


class LibraryView(BaseModel):
    programs: list[dict[str, Any]]
    empty_message: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.programs


def _view(programs: list[dict[str, Any]], empty_message: str) -> LibraryView:
    return LibraryView(programs=programs, empty_message=None if programs else empty_message)


def _raise_remote_error(error: str | None) -> None:
    raise AppError(
        errcode=AppErrorCode.E_REMOTE_STORE,
        errmesg=error or "Remote store request failed",
        status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
    )


class LibraryViewService:
    def __init__(self, gateway: SupabaseGateway):
        self._gateway = gateway

    async def favorites_view(self, favorite_ids: list[str]) -> LibraryView:
        ids = list(dict.fromkeys(str(i) for i in favorite_ids if str(i).strip()))
        if not ids:
            return _view([], NO_FAVORITES_MESSAGE)

        result = await self._gateway.fetch_programs_by_ids(ids)
        if not result.ok:
            _raise_remote_error(result.error)
        return _view(list(result.data or []), NO_FAVORITES_MESSAGE)

    async def continue_watching_view(self, video_source_ids: list[str]) -> LibraryView:
        """Programs whose channel video URL has a stored progress entry."""
        sources = set(video_source_ids)
        if not sources:
            return _view([], NO_PROGRESS_MESSAGE)

        result = await self._gateway.fetch_programs()
        if not result.ok:
            _raise_remote_error(result.error)

        programs = [
            program
            for program in result.data or []
            if program.get("mp4_url")
            and channel_video_url(program.get("channel_id", ""), program["mp4_url"]) in sources
        ]
        return _view(programs, NO_PROGRESS_MESSAGE)
