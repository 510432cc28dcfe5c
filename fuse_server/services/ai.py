# fuse_server/services/ai.py
import logging
from typing import Annotated, Optional

import httpx
from fastapi import Depends

from fuse_server.core.config import SettingsDep
from fuse_server.core.errors import UpstreamError
from fuse_server.schemas.ai import AISuggestions, SuggestionRequest

logger = logging.getLogger(__name__)


class SuggestionClient:
    """Synchronous client of the external metadata suggestion service."""

    def __init__(
        self,
        endpoint: Optional[str],
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.transport = transport

    def suggest(self, metadata: SuggestionRequest) -> AISuggestions:
        if not self.endpoint:
            logger.error("AI suggestion requested but AI_SERVICE is not configured")
            raise UpstreamError("AI suggestion service is not configured")

        request_body = {
            "videoTitle": metadata.title,
            "videoDescription": metadata.description,
            "videoKeywords": metadata.keywords,
            "videoCategory": metadata.category,
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.endpoint, json=request_body)
        except httpx.HTTPError as e:
            logger.error(f"Error sending AI request: {e}", exc_info=True)
            raise UpstreamError("Failed to get AI suggestions") from e

        if response.status_code != httpx.codes.OK:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = body.get("error") if isinstance(body, dict) else None
            logger.warning(f"AI service returned {response.status_code}: {detail or response.text}")
            raise UpstreamError(f"AI service returned error: {detail or response.status_code}")

        try:
            return AISuggestions.model_validate(response.json())
        except ValueError as e:
            # pydantic's ValidationError is a ValueError too
            logger.error(f"Error decoding AI response: {e}")
            raise UpstreamError("Failed to decode AI suggestions") from e


def get_suggestion_client(settings: SettingsDep) -> SuggestionClient:
    return SuggestionClient(settings.ai_service_url, timeout=settings.ai_timeout_seconds)


SuggestionClientDep = Annotated[SuggestionClient, Depends(get_suggestion_client)]
