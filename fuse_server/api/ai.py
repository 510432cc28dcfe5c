# fuse_server/api/ai.py
from fastapi import APIRouter

from fuse_server.schemas.ai import AISuggestions, SuggestionRequest
from fuse_server.services.ai import SuggestionClientDep

router = APIRouter()


@router.post("/suggestions", response_model=AISuggestions)
def get_suggestions(metadata: SuggestionRequest, ai_client: SuggestionClientDep):
    """Forwards video metadata to the suggestion service."""
    return ai_client.suggest(metadata)
