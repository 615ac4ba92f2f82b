from typing import Any

from pydantic import BaseModel, Field


class FavoritesIn(BaseModel):
    ids: list[str | int] = Field(default_factory=list, description="Favorite program ids")


class ContinueWatchingIn(BaseModel):
    video_source_ids: list[str] = Field(
        default_factory=list, description="Video source ids with stored progress"
    )


class LibraryOut(BaseModel):
    programs: list[dict[str, Any]]
    empty_message: str | None = None
