# fuse_server/schemas/write.py
"""Inbound payloads and merge-patch semantics.

Unknown fields are ignored and missing fields take their zero value, so an
absent field and an explicitly zero one ("", [], false, 0, null) cannot be
told apart. ``merge_patch`` treats both as "unchanged": a boolean can never be
reset to false and a string can never be cleared through an update.
"""
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from fuse_server.models.iteration import IterationStatus
from fuse_server.models.user import Tier
from fuse_server.models.video import VideoStatus


def blank_as_absent(value: Any) -> Any:
    return None if value == "" else value


class Reference(BaseModel):
    """``{"id": ...}`` pointer to another entity."""

    id: str = ""


class Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Fields naming other entities; never written as columns
    relations: ClassVar[Tuple[str, ...]] = ()

    def merge_patch(self) -> Dict[str, Any]:
        """Returns the non-zero column fields only."""
        changes = {}
        for name in type(self).model_fields:
            if name in self.relations:
                continue
            value = getattr(self, name)
            if not value:
                continue
            changes[name] = value.value if isinstance(value, Enum) else value
        return changes


class AccountPayload(Payload):
    username: str = ""
    email: Optional[EmailStr] = None
    password: str = ""
    tier: Optional[Tier] = None
    trial: bool = False

    @field_validator("email", "tier", mode="before")
    @classmethod
    def blank_fields(cls, value):
        return blank_as_absent(value)


class UserPayload(AccountPayload):
    pass


class EditorPayload(AccountPayload):
    pass


class ChannelPayload(Payload):
    name: str = ""
    api_key: str = ""


class VideoPayload(Payload):
    relations: ClassVar[Tuple[str, ...]] = ("channel", "editors")

    status: Optional[VideoStatus] = None
    resources: str = ""
    title: str = ""
    description: str = ""
    keywords: List[str] = Field(default_factory=list)
    category: str = ""
    privacy_status: bool = Field(default=False, alias="privacyStatus")
    channel: Optional[Reference] = None
    editors: List[Reference] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def blank_status(cls, value):
        return blank_as_absent(value)

    @property
    def channel_id(self) -> str:
        return self.channel.id if self.channel else ""

    @property
    def editor_ids(self) -> List[str]:
        return [editor.id for editor in self.editors if editor.id]


class IterationPayload(Payload):
    relations: ClassVar[Tuple[str, ...]] = ("video",)

    video: Optional[Reference] = None
    url: str = ""
    length: str = ""
    status: Optional[IterationStatus] = None
    notes: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def blank_status(cls, value):
        return blank_as_absent(value)

    @property
    def video_id(self) -> str:
        return self.video.id if self.video else ""


class NotePayload(Payload):
    content: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class TokenResponse(BaseModel):
    token: str
