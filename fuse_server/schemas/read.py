# fuse_server/schemas/read.py
"""Outbound representations.

None of these carries a password field. How deep the nesting goes is decided
by the store when it hydrates them; the models themselves do not cap it.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from fuse_server.models.iteration import IterationStatus
from fuse_server.models.user import Tier
from fuse_server.models.video import VideoStatus


class ReadModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class UserRead(ReadModel):
    username: str = ""
    email: str
    tier: Tier = Tier.FREE
    trial: bool = False
    channels: List["ChannelRead"] = Field(default_factory=list)


class EditorRead(ReadModel):
    username: str = ""
    email: str
    tier: Tier = Tier.FREE
    trial: bool = False


class ChannelRead(ReadModel):
    name: str = ""
    api_key: str = ""
    owner_id: str = Field(alias="ownerId")
    owner: UserRead
    videos: List["VideoRead"] = Field(default_factory=list)


class IterationRead(ReadModel):
    video_id: str = Field(alias="videoId")
    # Only set when the iteration is the top-level entity
    video: Optional["VideoRead"] = None
    url: str = ""
    length: str = ""
    status: IterationStatus = IterationStatus.PROCESSING
    notes: str = ""


class VideoRead(ReadModel):
    status: VideoStatus = VideoStatus.PENDING
    resources: str = ""
    title: str = ""
    description: str = ""
    keywords: List[str] = Field(default_factory=list)
    category: str = ""
    privacy_status: bool = Field(default=False, alias="privacyStatus")
    external_id: Optional[str] = Field(default=None, alias="externalId")
    channel_id: str = Field(alias="channelId")
    channel: ChannelRead
    iterations: List[IterationRead] = Field(default_factory=list)
    editors: List[EditorRead] = Field(default_factory=list)


class Message(BaseModel):
    message: str


UserRead.model_rebuild()
ChannelRead.model_rebuild()
IterationRead.model_rebuild()
VideoRead.model_rebuild()
