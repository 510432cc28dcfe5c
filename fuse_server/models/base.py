# fuse_server/models/base.py
import uuid
from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EntityBase(SQLModel):
    """Identity and server-assigned timestamps shared by every table."""

    id: str = Field(default_factory=new_id, primary_key=True, index=True, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
