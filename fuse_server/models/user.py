# fuse_server/models/user.py
from enum import Enum

from sqlmodel import Field

from fuse_server.models.base import EntityBase


class Tier(str, Enum):
    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"


class User(EntityBase, table=True):
    __tablename__ = "users"

    username: str = Field(default="", index=True)
    email: str = Field(index=True, unique=True)
    hashed_password: str = Field()
    tier: str = Field(default=Tier.FREE.value)
    trial: bool = Field(default=False)
