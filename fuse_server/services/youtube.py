# fuse_server/services/youtube.py
import io
import logging
from typing import Annotated, Optional

import httpx
from fastapi import Depends
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from fuse_server.core.errors import UpstreamError
from fuse_server.schemas.read import VideoRead

logger = logging.getLogger(__name__)

YOUTUBE_API_SERVICE_NAME = 'youtube'
YOUTUBE_API_VERSION = 'v3'
DEFAULT_MIMETYPE = 'video/mp4'


class YouTubePublisher:
    """Pushes a rendered iteration to YouTube on behalf of a channel.

    The channel's ``api_key`` is used as the OAuth access token of the
    uploading account.
    """

    def __init__(self, transport: Optional[httpx.BaseTransport] = None, timeout: float = 120.0):
        self.transport = transport
        self.timeout = timeout

    def _download(self, media_url: str) -> tuple[bytes, str]:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport, follow_redirects=True) as client:
                response = client.get(media_url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Could not download media {media_url}: {e}")
            raise UpstreamError("Failed to download video media") from e
        mimetype = response.headers.get('content-type', DEFAULT_MIMETYPE).split(';')[0]
        if not mimetype.startswith('video/'):
            mimetype = DEFAULT_MIMETYPE
        return response.content, mimetype

    def publish(self, media_url: str, credential: str, video: VideoRead) -> str:
        """Uploads the media and returns the new YouTube video id."""
        if not credential:
            raise UpstreamError("Channel has no publishing credential")

        content, mimetype = self._download(media_url)
        body = {
            'snippet': {
                'title': video.title,
                'description': video.description,
                'tags': video.keywords,
                'categoryId': video.category,
            },
            'status': {
                'privacyStatus': 'private' if video.privacy_status else 'public',
            },
        }

        try:
            youtube = build(
                YOUTUBE_API_SERVICE_NAME,
                YOUTUBE_API_VERSION,
                credentials=Credentials(token=credential),
                cache_discovery=False,
            )
            media = MediaIoBaseUpload(io.BytesIO(content), mimetype=mimetype, resumable=True)
            request = youtube.videos().insert(part='snippet,status', body=body, media_body=media)
            response = None
            while response is None:
                _, response = request.next_chunk()
        except HttpError as e:
            logger.error(f"YouTube API error while uploading video {video.id}: {e}")
            raise UpstreamError("Failed to upload video to YouTube") from e

        external_id = response.get('id')
        if not external_id:
            logger.error(f"YouTube response for video {video.id} has no id: {response}")
            raise UpstreamError("YouTube did not return a video id")
        logger.info(f"Uploaded video {video.id} to YouTube as {external_id}")
        return external_id


def get_publisher() -> YouTubePublisher:
    return YouTubePublisher()


PublisherDep = Annotated[YouTubePublisher, Depends(get_publisher)]
