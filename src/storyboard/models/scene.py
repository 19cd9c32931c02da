"""Scene data models."""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from .media import MediaResult


class TransitionType(str, Enum):
    """Transition into a scene."""
    FADE = "fade"
    SLIDE = "slide"
    ZOOM = "zoom"
    WIPE = "wipe"


class SubtitleTransition(str, Enum):
    """How subtitles enter a scene."""
    FADE = "fade"
    SLIDE = "slide"
    NONE = "none"


class PlannedScene(BaseModel):
    """One timed segment of a video, as planned by the model."""

    title: str = Field(..., description="Short title of the scene", min_length=1)
    narration: str = Field(
        ...,
        description="2-3 sentence narration script, used for text-to-speech",
        min_length=1,
    )
    duration_seconds: float = Field(..., description="Scene duration in seconds", gt=0)
    visual_keywords: str = Field(
        default="",
        description=(
            "Comma-separated keywords for searching stock images and videos "
            "(e.g. \"sunset, beach, ocean waves\")"
        ),
    )
    audio_keywords: str = Field(
        default="",
        description=(
            "Short, simple audio search terms, at most 3-4 basic words "
            "(e.g. \"piano\", \"ambient music\", \"rain\")"
        ),
    )
    transition_type: TransitionType = Field(
        default=TransitionType.FADE,
        description="Transition effect used when moving to this scene",
    )
    subtitle_transition: SubtitleTransition = Field(
        default=SubtitleTransition.FADE,
        description="How subtitles transition in this scene",
    )

    class Config:
        """Pydantic config."""
        str_strip_whitespace = True

    @field_validator("transition_type", "subtitle_transition", mode="before")
    @classmethod
    def _lower_enum(cls, value: Any) -> Any:
        if value is None:
            return "fade"
        if isinstance(value, str):
            return value.strip().lower()
        return value


class ScenePlanOutput(BaseModel):
    """Structured output requested from the model: an ordered scene list."""

    scenes: List[PlannedScene] = Field(..., description="Scenes in playback order")


class Scene(PlannedScene):
    """A planned scene inside a project, with an id and selected media."""

    id: str = Field(..., description="Unique scene identifier")
    selected_visual: Optional[MediaResult] = Field(None, description="Main visual for the scene")
    transition_visual: Optional[MediaResult] = Field(None, description="Visual shown during the transition")
    narration_video: Optional[MediaResult] = Field(None, description="Video shown behind the narration")
    selected_audio: Optional[MediaResult] = Field(None, description="Scene-specific audio")
    bg_audio: Optional[MediaResult] = Field(None, description="Background audio for the scene")


ScenePlan = List[PlannedScene]
