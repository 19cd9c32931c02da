"""Keyword suggestion agent."""

import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError as SchemaError

from ..config import Credentials
from ..keywords import dedupe_keywords
from ..models import KeywordSuggestionRequest, KeywordSuggestions
from .base import BaseAgent

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE_PATH = Path(__file__).parent.parent / "prompts" / "keyword_refiner.txt"

OUTPUT_TOOL = "record_keywords"


def _load_system_prompt() -> str:
    """Load the system prompt from template file."""
    if PROMPT_TEMPLATE_PATH.exists():
        return PROMPT_TEMPLATE_PATH.read_text()
    return """You help fine-tune search keywords for a video scene.
Record alternative keywords with the provided tool."""


class KeywordRefiner(BaseAgent[KeywordSuggestionRequest, List[str]]):
    """Agent that proposes alternative search keywords for a scene.

    Suggestions are optional, so every failure ends in an empty list
    instead of an exception.
    """

    @property
    def name(self) -> str:
        """Return the agent's name."""
        return "KeywordRefiner"

    @property
    def system_prompt(self) -> str:
        """Return the system prompt for keyword suggestions."""
        return _load_system_prompt()

    def run(self, input_data: KeywordSuggestionRequest) -> List[str]:
        """Suggest keywords, or return [] when no suggestion is available."""
        try:
            data = self._create_structured(
                prompt=self._build_prompt(input_data),
                schema=KeywordSuggestions.model_json_schema(),
                tool_name=OUTPUT_TOOL,
                tool_description="Record the suggested keywords.",
                max_tokens=1024,
                temperature=0.7,
            )
            suggestions = KeywordSuggestions.model_validate(data)
        except SchemaError as e:
            self._logger.warning(f"Keyword suggestions did not match the schema: {e.error_count()} error(s)")
            return []
        except Exception as e:
            self._logger.warning(f"Keyword suggestions unavailable: {e}")
            return []

        # Models sometimes pack several keywords into one comma-separated entry
        keywords = dedupe_keywords(
            part for entry in suggestions.suggested_keywords for part in entry.split(",")
        )
        self._logger.info(f"Suggested {len(keywords)} keywords")
        return keywords

    def _build_prompt(self, input_data: KeywordSuggestionRequest) -> str:
        """Build the user prompt for keyword suggestions."""
        existing = ", ".join(input_data.existing) or "(none)"
        candidates = ", ".join(input_data.candidates) or "(none)"
        return "\n".join([
            f"The scene is described as: {input_data.description.strip()}",
            "",
            f"The existing keywords are: {existing}",
            f"The user wants to consider these new keywords: {candidates}",
            "",
            "Based on the scene description and the new keywords, suggest alternative "
            "keywords that could improve image and audio selection for the scene.",
        ])


def _as_strings(values) -> List[str]:
    if not values:
        return []
    if isinstance(values, str) or not hasattr(values, "__iter__"):
        values = [values]
    return [str(value) for value in values if value is not None]


def suggest_keywords(
    description: str,
    existing: Sequence[str],
    candidates: Sequence[str],
    credentials: Optional[Credentials] = None,
    client: Optional[Any] = None,
) -> List[str]:
    """Return alternative keywords for a scene, or [] if none are available."""
    request = KeywordSuggestionRequest(
        description=str(description or ""),
        existing=_as_strings(existing),
        candidates=_as_strings(candidates),
    )
    return KeywordRefiner(credentials=credentials, client=client).run(request)
