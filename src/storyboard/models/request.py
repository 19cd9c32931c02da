"""Scene plan request model."""

from enum import Enum

from pydantic import BaseModel, Field


class AspectRatio(str, Enum):
    """Output orientation."""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ScenePlanRequest(BaseModel):
    """User input for one scene plan generation.

    Bounds are checked by the planner against `PlanLimits` so that they
    stay configurable and raise the pipeline's own `ValidationError`.
    """

    prompt: str = Field(..., description="Free-text description of the video")
    aspect_ratio: AspectRatio = Field(default=AspectRatio.HORIZONTAL, description="Output orientation")
    target_duration_seconds: float = Field(..., description="Soft target for the total length")
    desired_scene_count: int = Field(default=6, description="Hint for how many scenes to plan")

    class Config:
        """Pydantic config."""
        frozen = True
