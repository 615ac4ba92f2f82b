from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NewsItemsIn(BaseModel):
    items: list[Any] = Field(default_factory=list, description="Ticker lines")

    @field_validator("items", mode="before")
    @classmethod
    def coerce_items(cls, v: Any) -> list[str]:
        if not isinstance(v, list):
            return []
        return [str(item) for item in v]


class NewsItemsOut(BaseModel):
    items: list[str]


class LoadFromPublishedIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    channel_id: str | int | None = Field(default=None, alias="channelId")
    day: str | None = Field(default=None, description="Schedule day, forwarded as-is")


class LoadFromPublishedOut(BaseModel):
    ok: bool = True
    copied: int = 0


class SignedUrlOut(BaseModel):
    url: str
    expires_in: int


class MediaSignedUrlIn(BaseModel):
    bucket: str | None = Field(default=None, description="Storage bucket")
    path: str | None = Field(default=None, description="Object path inside the bucket")
