"""Scene planning agent."""

import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError as SchemaError

from ..config import DEFAULT_LIMITS, Credentials, PlanLimits
from ..errors import GenerationFailure, ValidationError
from ..models import PlannedScene, ScenePlan, ScenePlanOutput, ScenePlanRequest
from .base import BaseAgent

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE_PATH = Path(__file__).parent.parent / "prompts" / "scene_planner.txt"

OUTPUT_TOOL = "record_scene_plan"


def _load_system_prompt() -> str:
    """Load the system prompt from template file."""
    if PROMPT_TEMPLATE_PATH.exists():
        return PROMPT_TEMPLATE_PATH.read_text()
    # Fallback inline prompt if template not found
    return """You are an AI video scene planner.
Given a prompt and parameters, generate a sequence of timed video scenes
and record them with the provided tool, in playback order."""


def validate_request(request: ScenePlanRequest, limits: PlanLimits = DEFAULT_LIMITS) -> None:
    """Check a request against `limits`.

    Raises:
        ValidationError: If the prompt is too short or a number is out of bounds.
    """
    prompt = (request.prompt or "").strip()
    if len(prompt) < limits.min_prompt_length:
        raise ValidationError(
            f"Prompt is too short (minimum {limits.min_prompt_length} characters). "
            "Please provide a more detailed description."
        )

    duration = request.target_duration_seconds
    if not limits.min_duration_seconds <= duration <= limits.max_duration_seconds:
        raise ValidationError(
            f"Target duration must be between {limits.min_duration_seconds:g} and "
            f"{limits.max_duration_seconds:g} seconds, got {duration:g}"
        )

    count = request.desired_scene_count
    if not limits.min_scene_count <= count <= limits.max_scene_count:
        raise ValidationError(
            f"Scene count must be between {limits.min_scene_count} and "
            f"{limits.max_scene_count}, got {count}"
        )


class ScenePlanner(BaseAgent[ScenePlanRequest, ScenePlan]):
    """Agent that turns a prompt into an ordered list of timed scenes.

    One model call per run. The returned durations are the model's own;
    they are aimed at the target total but never rescaled to hit it.
    """

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        client: Optional[Any] = None,
        limits: Optional[PlanLimits] = None,
    ) -> None:
        super().__init__(credentials=credentials, client=client)
        self._limits = limits or DEFAULT_LIMITS

    @property
    def name(self) -> str:
        """Return the agent's name."""
        return "ScenePlanner"

    @property
    def system_prompt(self) -> str:
        """Return the system prompt for scene planning."""
        return _load_system_prompt()

    def run(self, input_data: ScenePlanRequest) -> ScenePlan:
        """Generate a scene plan.

        Args:
            input_data: Prompt and constraints.

        Returns:
            Scenes in the order the model returned them.

        Raises:
            ValidationError: If the request fails its bounds. No call is made.
            ConfigurationError: If the model key is missing or rejected.
            GenerationFailure: If no usable scenes come back.
        """
        validate_request(input_data, self._limits)

        self._logger.info(
            f"Planning scenes for: '{input_data.prompt[:60]}' "
            f"(duration: {input_data.target_duration_seconds:g}s, "
            f"scenes: ~{input_data.desired_scene_count})"
        )

        prompt = self._build_prompt(input_data)

        data = self._create_structured(
            prompt=prompt,
            schema=ScenePlanOutput.model_json_schema(),
            tool_name=OUTPUT_TOOL,
            tool_description="Record the planned scenes in playback order.",
            max_tokens=4096,
            temperature=0.8,  # Higher temperature for creative output
        )

        scenes = self._parse_response(data)

        total = sum(scene.duration_seconds for scene in scenes)
        self._logger.info(f"Generated {len(scenes)} scenes ({total:g}s total)")
        return scenes

    def _build_prompt(self, input_data: ScenePlanRequest) -> str:
        """Build the user prompt for scene planning."""
        ratio = input_data.aspect_ratio.value
        duration = input_data.target_duration_seconds
        prompt_parts = [
            "Create a video scene plan for the following prompt.",
            "",
            f"PROMPT: {input_data.prompt.strip()}",
            f"TOTAL DURATION: about {duration:g} seconds",
            f"ASPECT RATIO: {ratio}",
            f"NUMBER OF SCENES: around {input_data.desired_scene_count} (adjust if needed for pacing)",
            "",
            f"Distribute the total duration of {duration:g} seconds across the scenes.",
            f"Make the visual keywords descriptive and specific for a {ratio} frame.",
            "Audio keywords must be SHORT and SIMPLE, basic sound or music terms "
            "(e.g. \"piano\", \"guitar\", \"ambient\", \"drums\", \"nature\", \"rain\", \"wind\"), "
            "at most 3-4 words. Avoid complex or overly specific phrases.",
        ]
        return "\n".join(prompt_parts)

    def _parse_response(self, data: Any) -> ScenePlan:
        """Validate the structured output into scenes.

        Raises:
            GenerationFailure: If the payload has no scenes array, fails the
                schema, or is empty.
        """
        # Handle different response formats
        scenes_data = data.get("scenes") if isinstance(data, dict) else data

        if not isinstance(scenes_data, list):
            raise GenerationFailure("Could not generate scenes: response has no scenes array")

        try:
            scenes = [PlannedScene.model_validate(item) for item in scenes_data]
        except SchemaError as e:
            self._logger.error(f"Scene output failed validation: {e}")
            raise GenerationFailure(f"Could not generate scenes: {e.error_count()} invalid field(s)") from e

        if not scenes:
            raise GenerationFailure("Could not generate scenes: the model returned an empty plan")

        return scenes


def generate_scene_plan(
    request: ScenePlanRequest,
    credentials: Optional[Credentials] = None,
    client: Optional[Any] = None,
    limits: Optional[PlanLimits] = None,
) -> ScenePlan:
    """Generate a validated scene plan for `request`."""
    return ScenePlanner(credentials=credentials, client=client, limits=limits).run(request)
