from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChannelAccessIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    channel_key: str | int | None = Field(
        default=None, alias="channelKey", description="Channel identifier"
    )
    passcode: str | None = Field(default=None, description="Passcode supplied by the viewer")


class ChannelAccessOut(BaseModel):
    ok: bool


class ChannelAccessStatusOut(BaseModel):
    channel_key: str
    protected: bool
    allowed: bool


class ProtectedChannelsOut(BaseModel):
    channel_keys: list[str]


class PlaybackOut(BaseModel):
    channel_key: str
    url: str
    is_standby: bool
    locked: bool
    program: dict[str, Any] | None = None


class StandbyOut(BaseModel):
    channel_key: str
    url: str
