"""Stock media search result model."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class MediaType(str, Enum):
    """Kind of media a search returns."""
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"


class MediaResult(BaseModel):
    """One stock-media hit, independent of the provider it came from."""

    id: str = Field(..., description="Provider-specific identifier")
    type: MediaType = Field(..., description="Media kind")
    title: str = Field(..., description="Display title")
    url: str = Field(..., description="Best available media URL")
    preview_url: Optional[str] = Field(None, description="Thumbnail or preview URL")
    duration_seconds: Optional[float] = Field(None, description="Clip length, when known")
    tags: List[str] = Field(default_factory=list, description="Provider tags")

    def as_keywords(self, limit: int = 5) -> str:
        """Return the first tags as a keyword string, or the title without tags."""
        return ", ".join(self.tags[:limit]) or self.title

    class Config:
        """Pydantic config."""
        frozen = True
