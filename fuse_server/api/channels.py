# fuse_server/api/channels.py
import logging
from typing import List

from fastapi import APIRouter, status

from fuse_server.api.auth import CurrentUser
from fuse_server.core.errors import ForbiddenError
from fuse_server.schemas.read import ChannelRead, Message, UserRead
from fuse_server.schemas.write import ChannelPayload
from fuse_server.services.store import EntityStore, StoreDep

logger = logging.getLogger(__name__)

router = APIRouter()


def owned_channel(store: EntityStore, channel_id: str, caller: UserRead) -> ChannelRead:
    """Fetches the channel, failing with 403 unless ``caller`` owns it."""
    channel = store.get_channel(channel_id)
    if channel.owner_id != caller.id:
        logger.warning(f"User {caller.id} is not the owner of channel {channel_id}")
        raise ForbiddenError("You are not the owner of this channel")
    return channel


@router.get("/", response_model=List[ChannelRead])
def list_channels(current_user: CurrentUser, store: StoreDep):
    return store.list_channels(owner_id=current_user.id)


@router.post("/", response_model=ChannelRead, status_code=status.HTTP_201_CREATED)
def create_channel(payload: ChannelPayload, current_user: CurrentUser, store: StoreDep):
    return store.create_channel(current_user.id, payload.merge_patch())


@router.get("/{channel_id}", response_model=ChannelRead)
def get_channel(channel_id: str, store: StoreDep):
    return store.get_channel(channel_id, depth=1)


@router.patch("/{channel_id}", response_model=ChannelRead)
def update_channel(channel_id: str, payload: ChannelPayload, current_user: CurrentUser, store: StoreDep):
    owned_channel(store, channel_id, current_user)
    return store.update_channel(channel_id, payload.merge_patch())


@router.delete("/{channel_id}", response_model=Message)
def delete_channel(channel_id: str, current_user: CurrentUser, store: StoreDep):
    owned_channel(store, channel_id, current_user)
    store.delete_channel(channel_id)
    return Message(message="Channel deleted successfully")
