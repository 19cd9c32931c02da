"""AI agents for scene planning and keyword refinement."""

from .base import BaseAgent
from .keyword_refiner import KeywordRefiner, suggest_keywords
from .scene_planner import ScenePlanner, generate_scene_plan, validate_request

__all__ = [
    "BaseAgent",
    "KeywordRefiner",
    "ScenePlanner",
    "generate_scene_plan",
    "suggest_keywords",
    "validate_request",
]
