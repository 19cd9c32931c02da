"""Keyword suggestion models."""

from typing import List

from pydantic import BaseModel, Field


class KeywordSuggestionRequest(BaseModel):
    """Input for a keyword suggestion call."""

    description: str = Field(..., description="What the scene shows")
    existing: List[str] = Field(default_factory=list, description="Keywords the scene already has")
    candidates: List[str] = Field(default_factory=list, description="Keywords the user is considering")


class KeywordSuggestions(BaseModel):
    """Structured output requested from the model."""

    suggested_keywords: List[str] = Field(
        default_factory=list,
        description="Alternative keywords that would improve image and audio search results",
    )
