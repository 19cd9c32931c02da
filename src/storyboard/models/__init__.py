"""Data models for the storyboard builder."""

from .keywords import KeywordSuggestionRequest, KeywordSuggestions
from .media import MediaResult, MediaType
from .profile import PollyEngine, TTSProvider, UserConfig
from .project import Project, ProjectUpdate, RenderOptions, SceneUpdate
from .request import AspectRatio, ScenePlanRequest
from .scene import (
    PlannedScene,
    Scene,
    ScenePlan,
    ScenePlanOutput,
    SubtitleTransition,
    TransitionType,
)

__all__ = [
    "AspectRatio",
    "KeywordSuggestionRequest",
    "KeywordSuggestions",
    "MediaResult",
    "MediaType",
    "PlannedScene",
    "PollyEngine",
    "Project",
    "ProjectUpdate",
    "RenderOptions",
    "Scene",
    "ScenePlan",
    "ScenePlanOutput",
    "ScenePlanRequest",
    "SceneUpdate",
    "SubtitleTransition",
    "TTSProvider",
    "UserConfig",
]
