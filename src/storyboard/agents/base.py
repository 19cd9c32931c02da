"""Base agent abstraction."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from ..config import Credentials
from ..errors import GenerationFailure
from ..services.anthropic import AnthropicClient

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


def extract_json(response: str) -> str:
    """Extract JSON from a response that may contain markdown or other text."""
    # Try to find JSON in code blocks
    if "```json" in response:
        start = response.find("```json") + 7
        end = response.find("```", start)
        if end > start:
            return response[start:end].strip()

    if "```" in response:
        start = response.find("```") + 3
        end = response.find("```", start)
        if end > start:
            return response[start:end].strip()

    # Try to find raw JSON object or array
    for start_char, end_char in [("{", "}"), ("[", "]")]:
        start = response.find(start_char)
        if start != -1:
            depth = 0
            for i, char in enumerate(response[start:], start):
                if char == start_char:
                    depth += 1
                elif char == end_char:
                    depth -= 1
                    if depth == 0:
                        return response[start:i + 1]

    return response.strip()


class BaseAgent(ABC, Generic[InputT, OutputT]):
    """Abstract base class for agents that ask Claude for structured output.

    Subclasses define their prompts and implement `run`. The client is
    created lazily from the per-call credentials, so nothing is sent (and
    no key is required) until `_create_structured` is reached.
    """

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        client: Optional[Any] = None,
    ) -> None:
        """Initialize the agent.

        Args:
            credentials: Keys and model for this call.
            client: Object with a `create_structured` method. Built from
                `credentials` when not provided.
        """
        self._credentials = credentials or Credentials()
        self._client = client
        self._logger = logging.getLogger(f"{__name__}.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the agent's name."""
        ...

    @property
    @abstractmethod
    def system_prompt(self) -> str:
        """Return the system prompt for this agent."""
        ...

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._credentials.model

    @abstractmethod
    def run(self, input_data: InputT) -> OutputT:
        """Execute the agent's main task."""
        ...

    def _get_client(self) -> Any:
        if self._client is None:
            api_key = self._credentials.require_model_key()
            self._client = AnthropicClient(api_key=api_key, model=self._credentials.model)
        return self._client

    def _create_structured(
        self,
        prompt: str,
        schema: dict,
        tool_name: str,
        tool_description: str = "",
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> Any:
        """Send one structured request and return the decoded payload.

        Returns:
            The decoded JSON value.

        Raises:
            ConfigurationError: If the model key is missing or rejected.
            ModelUnavailable: If the request fails before any output arrives.
                Not a `GenerationFailure`.
            GenerationFailure: If the response is empty or not JSON.
        """
        client = self._get_client()
        self._logger.debug(f"Creating structured message with prompt length: {len(prompt)}")

        response = client.create_structured(
            prompt=prompt,
            schema=schema,
            tool_name=tool_name,
            tool_description=tool_description,
            system=self.system_prompt,
            max_tokens=max_tokens,
            temperature=temperature,
        )

        if response is None:
            raise GenerationFailure("Model returned an empty response")
        if not isinstance(response, str):
            return response

        try:
            return json.loads(extract_json(response))
        except json.JSONDecodeError as e:
            self._logger.debug(f"Raw response: {response}")
            raise GenerationFailure(f"Invalid JSON in response: {e}") from e
