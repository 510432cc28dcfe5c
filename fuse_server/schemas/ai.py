# fuse_server/schemas/ai.py
from typing import List

from pydantic import BaseModel, Field


class SuggestionRequest(BaseModel):
    title: str = ""
    description: str = ""
    keywords: List[str] = Field(default_factory=list)
    category: str = ""


class AISuggestions(BaseModel):
    title: str = ""
    description: str = ""
    keywords: List[str] = Field(default_factory=list)
    chapters: List[str] = Field(default_factory=list)
    thumbnail: str = ""
    category: str = ""
