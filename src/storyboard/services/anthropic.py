"""Anthropic Claude API client wrapper."""

import logging
from typing import Any, Optional

from anthropic import (
    Anthropic,
    APIConnectionError,
    APIError,
    AuthenticationError,
    PermissionDeniedError,
)

from ..config import DEFAULT_MODEL
from ..errors import ConfigurationError, ModelUnavailable

logger = logging.getLogger(__name__)


class AnthropicClient:
    """Client wrapper for the Anthropic Messages API.

    Each call is a single request. Failures are translated into the
    pipeline's error types and never retried here.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
    ) -> None:
        """Initialize the Anthropic client.

        Args:
            api_key: Anthropic API key for this request.
            model: Model to use. Defaults to DEFAULT_MODEL.

        Raises:
            ConfigurationError: If no API key is given.
        """
        if not api_key:
            raise ConfigurationError(
                "Anthropic API key not provided. Set ANTHROPIC_API_KEY env var.",
                credential="ANTHROPIC_API_KEY",
            )

        self._client = Anthropic(api_key=api_key)
        self._model = model or DEFAULT_MODEL

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model

    def create_structured(
        self,
        prompt: str,
        schema: dict,
        tool_name: str,
        tool_description: str = "",
        system: Optional[str] = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> Any:
        """Ask Claude for output that matches `schema`.

        The schema is declared as the input of a single tool and the model
        is forced to call it, so the tool input is the structured result.

        Args:
            prompt: The user prompt to send.
            schema: JSON schema of the expected object.
            tool_name: Name of the output tool.
            tool_description: What the tool records.
            system: Optional system prompt.
            max_tokens: Maximum tokens in the response.
            temperature: Sampling temperature (0.0-1.0).

        Returns:
            The tool input as a dict, or the response text if the model
            answered without calling the tool. None if the response is empty.

        Raises:
            ConfigurationError: If the API key is rejected.
            ModelUnavailable: If the network or the API fails. Content
                problems are left to the caller.
        """
        kwargs = {
            "model": self._model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "tools": [
                {
                    "name": tool_name,
                    "description": tool_description,
                    "input_schema": schema,
                }
            ],
            "tool_choice": {"type": "tool", "name": tool_name},
        }
        if system:
            kwargs["system"] = system

        logger.debug(f"Sending structured request to Claude (tool: {tool_name})")

        try:
            response = self._client.messages.create(**kwargs)

        except (AuthenticationError, PermissionDeniedError) as e:
            logger.error(f"Anthropic rejected the API key: {e}")
            raise ConfigurationError(
                "Anthropic API key was rejected. Check ANTHROPIC_API_KEY.",
                credential="ANTHROPIC_API_KEY",
            ) from e

        except APIConnectionError as e:
            logger.error(f"Connection error: {e}")
            raise ModelUnavailable(f"Could not reach the Anthropic API: {e}") from e

        except APIError as e:
            logger.error(f"API error: {e}")
            raise ModelUnavailable(f"Anthropic API request failed: {e}") from e

        texts = []
        for block in response.content:
            if getattr(block, "type", None) == "tool_use" and block.name == tool_name:
                return block.input
            if hasattr(block, "text"):
                texts.append(block.text)

        if texts:
            logger.debug("Claude answered with text instead of the output tool")
            return "\n".join(texts)
        return None
