"""External service integrations."""

from .anthropic import AnthropicClient
from .freesound import FreesoundClient
from .media import MediaSearchAdapter, search_media
from .pixabay import PixabayClient

__all__ = [
    "AnthropicClient",
    "FreesoundClient",
    "MediaSearchAdapter",
    "PixabayClient",
    "search_media",
]
