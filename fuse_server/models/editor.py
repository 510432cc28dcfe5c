# fuse_server/models/editor.py
from sqlmodel import Field

from fuse_server.models.base import EntityBase
from fuse_server.models.user import Tier


class Editor(EntityBase, table=True):
    __tablename__ = "editors"

    username: str = Field(default="", index=True)
    email: str = Field(index=True)
    hashed_password: str = Field(default="")
    tier: str = Field(default=Tier.FREE.value)
    trial: bool = Field(default=False)
