# fuse_server/models/channel.py
from sqlmodel import Field

from fuse_server.models.base import EntityBase


class Channel(EntityBase, table=True):
    __tablename__ = "channels"

    name: str = Field(default="", index=True)
    api_key: str = Field(default="")  # publishing credential
    owner_id: str = Field(foreign_key="users.id", index=True)
