# fuse_server/api/videos.py
import logging
from typing import List, Optional

from fastapi import APIRouter, status

from fuse_server.api.auth import CurrentUser
from fuse_server.api.channels import owned_channel
from fuse_server.core.errors import InvalidError
from fuse_server.models.video import VideoStatus
from fuse_server.schemas.ai import SuggestionRequest
from fuse_server.schemas.read import Message, VideoRead
from fuse_server.schemas.write import VideoPayload
from fuse_server.services.ai import SuggestionClientDep
from fuse_server.services.store import StoreDep
from fuse_server.services.youtube import PublisherDep

logger = logging.getLogger(__name__)

router = APIRouter()

# Suggestion fields copied onto a new video when they are non-empty
SUGGESTED_FIELDS = ("title", "description", "keywords", "category")


@router.get("/", response_model=List[VideoRead])
def list_videos(current_user: CurrentUser, store: StoreDep, channel_id: Optional[str] = None):
    """Videos of every channel the caller owns, optionally of one channel only."""
    return store.list_videos(channel_id=channel_id, owner_id=current_user.id)


@router.post("/", response_model=VideoRead, status_code=status.HTTP_201_CREATED)
def create_video(
    payload: VideoPayload,
    current_user: CurrentUser,
    store: StoreDep,
    ai_client: SuggestionClientDep,
    suggest: bool = False,
):
    channel = owned_channel(store, payload.channel_id, current_user)
    values = payload.merge_patch()

    if suggest:
        metadata = SuggestionRequest(
            title=payload.title,
            description=payload.description,
            keywords=payload.keywords,
            category=payload.category,
        )
        suggestions = ai_client.suggest(metadata)
        for field in SUGGESTED_FIELDS:
            value = getattr(suggestions, field)
            if value:
                values[field] = value
        logger.info(f"Applied AI suggestions to new video in channel {channel.id}")

    return store.create_video(channel.id, values, payload.editor_ids)


@router.get("/{video_id}", response_model=VideoRead)
def get_video(video_id: str, store: StoreDep):
    return store.get_video(video_id)


@router.patch("/{video_id}", response_model=VideoRead)
def update_video(video_id: str, payload: VideoPayload, current_user: CurrentUser, store: StoreDep):
    video = store.get_video(video_id)
    owned_channel(store, video.channel_id, current_user)
    return store.update_video(video_id, payload.merge_patch(), payload.editor_ids)


@router.delete("/{video_id}", response_model=Message)
def delete_video(video_id: str, current_user: CurrentUser, store: StoreDep):
    video = store.get_video(video_id)
    owned_channel(store, video.channel_id, current_user)
    store.delete_video(video_id)
    return Message(message="Video deleted successfully")


@router.post("/{video_id}/upload", response_model=VideoRead)
def upload_video(video_id: str, current_user: CurrentUser, store: StoreDep, publisher: PublisherDep):
    """Publishes the most recent iteration and marks the video published."""
    video = store.get_video(video_id)
    owned_channel(store, video.channel_id, current_user)
    if not video.iterations:
        raise InvalidError("Video has no iterations to upload")

    last_iteration = video.iterations[-1]
    external_id = publisher.publish(last_iteration.url, video.channel.api_key, video)
    return store.update_video(
        video_id, {"status": VideoStatus.PUBLISHED.value, "external_id": external_id}
    )
