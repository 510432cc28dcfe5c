# fuse_server/models/video.py
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON, Column, String
from sqlalchemy.dialects.postgresql import ARRAY
from sqlmodel import Field, SQLModel

from fuse_server.models.base import EntityBase


class VideoStatus(str, Enum):
    PENDING = "pending"
    PUBLISHED = "published"
    DRAFT = "draft"


class VideoEditorLink(SQLModel, table=True):
    __tablename__ = "video_editor"

    video_id: str = Field(foreign_key="videos.id", primary_key=True)
    editor_id: str = Field(foreign_key="editors.id", primary_key=True)


class Video(EntityBase, table=True):
    __tablename__ = "videos"

    status: str = Field(default=VideoStatus.PENDING.value)
    resources: str = Field(default="")
    title: str = Field(default="")
    description: str = Field(default="")
    # Native text[] on PostgreSQL, JSON elsewhere
    keywords: List[str] = Field(
        default_factory=list,
        sa_column=Column(ARRAY(String).with_variant(JSON(), "sqlite"), nullable=False),
    )
    category: str = Field(default="")
    privacy_status: bool = Field(default=False)
    external_id: Optional[str] = Field(default=None, index=True)
    channel_id: str = Field(foreign_key="channels.id", index=True)
