"""Error types raised by the storyboard pipeline."""

from typing import Optional


class StoryboardError(Exception):
    """Base class for all storyboard errors."""


class ValidationError(StoryboardError):
    """Caller-supplied input failed a precondition.

    Raised before any network call is made.
    """


class ConfigurationError(StoryboardError):
    """A required credential is missing or was rejected by a provider."""

    def __init__(self, message: str, credential: Optional[str] = None) -> None:
        super().__init__(message)
        self.credential = credential


class GenerationFailure(StoryboardError):
    """The model produced no usable structured output."""


class ModelUnavailable(StoryboardError):
    """The model request failed at the transport or API level.

    Kept apart from `GenerationFailure`: the fix is to retry later or check
    the network, not to change the prompt.
    """


class ProviderError(StoryboardError):
    """A media-search provider request failed."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class PersistenceError(StoryboardError):
    """A document store read or write failed."""
