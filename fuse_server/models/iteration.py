# fuse_server/models/iteration.py
from enum import Enum

from sqlmodel import Field

from fuse_server.models.base import EntityBase


class IterationStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class Iteration(EntityBase, table=True):
    __tablename__ = "iterations"

    video_id: str = Field(foreign_key="videos.id", index=True)
    url: str = Field(default="")
    length: str = Field(default="")
    status: str = Field(default=IterationStatus.PROCESSING.value)
    notes: str = Field(default="")
