"""Shared plumbing for stock media search adapters."""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import requests
from pydantic import ValidationError as SchemaError

from ..errors import ConfigurationError, ProviderError, ValidationError
from ..keywords import DEFAULT_MAX_LENGTH, DEFAULT_MAX_TERMS, normalize_query
from ..models import MediaResult, MediaType

logger = logging.getLogger(__name__)


class MediaSearchAdapter(ABC):
    """Base class for stock media providers.

    Subclasses build the provider request and map its hits into
    `MediaResult`. Query normalization, credential checks and HTTP error
    handling live here.
    """

    provider: str = ""
    credential: str = ""
    supported: tuple = ()
    results_key: str = "results"

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            api_key: Provider key for this request.
            session: HTTP session. A new one is created if not provided.
            timeout: Request timeout in seconds; None uses the client default.
        """
        self._api_key = api_key or ""
        self._session = session or requests.Session()
        self._timeout = timeout

    def search(self, query: str, kind: MediaType) -> List[MediaResult]:
        """Search the provider.

        Args:
            query: Free text or comma-separated keywords.
            kind: Media kind to search for.

        Returns:
            Mapped results; empty when nothing matched.

        Raises:
            ValidationError: If the query is empty after normalization or
                the kind is not supported.
            ConfigurationError: If the key is missing or rejected.
            ProviderError: If the request fails.
        """
        kind = MediaType(kind)
        if kind not in self.supported:
            raise ValidationError(f"{self.provider} does not provide {kind.value} results")

        safe_query = normalize_query(query, DEFAULT_MAX_TERMS, DEFAULT_MAX_LENGTH)
        if not safe_query:
            raise ValidationError("Search query is empty. Add keywords before searching.")

        if not self._api_key:
            raise ConfigurationError(
                f"{self.provider} API key missing. Save it with 'storyboard configure'.",
                credential=self.credential,
            )

        url, params = self._build_request(safe_query, kind)
        logger.info(f"Searching {self.provider} for {kind.value}: '{safe_query}'")
        data = self._get_json(url, params)

        results = self._map_results(data, kind)
        if not results:
            logger.info(f"No {kind.value} results on {self.provider} for '{safe_query}'")
        return results

    @abstractmethod
    def _build_request(self, query: str, kind: MediaType) -> tuple:
        """Return the endpoint URL and query parameters."""
        ...

    @abstractmethod
    def _map_hit(self, hit: dict, kind: MediaType) -> Optional[MediaResult]:
        """Map one provider hit, or return None when it has no usable media."""
        ...

    def _map_results(self, data: dict, kind: MediaType) -> List[MediaResult]:
        """Map a decoded provider response into results.

        Hits that are not objects or fail field validation are skipped.
        """
        hits = data.get(self.results_key)
        if hits is None:
            return []
        if not isinstance(hits, list):
            raise ProviderError(
                f"{self.provider} returned a malformed response",
                provider=self.provider,
                status_code=200,
            )

        results: List[MediaResult] = []
        for hit in hits:
            if not isinstance(hit, dict):
                logger.warning(f"Skipping malformed {self.provider} hit: {hit!r:.80}")
                continue
            try:
                result = self._map_hit(hit, kind)
            except (AttributeError, TypeError, SchemaError) as e:
                logger.warning(f"Skipping malformed {self.provider} hit {hit.get('id')}: {e}")
                continue
            if result is None:
                logger.debug(f"Skipping {self.provider} hit without a media URL: {hit.get('id')}")
                continue
            results.append(result)
        return results

    def _get_json(self, url: str, params: dict) -> dict:
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as e:
            logger.error(f"{self.provider} request failed: {e}")
            raise ProviderError(f"{self.provider} request failed: {e}", provider=self.provider) from e

        if response.status_code in (401, 403):
            raise ConfigurationError(
                f"{self.provider} rejected the API key ({response.status_code}). "
                "Check it with 'storyboard configure'.",
                credential=self.credential,
            )

        if response.status_code != 200:
            error_msg = f"{response.status_code}: {response.text[:500]}"
            logger.error(f"{self.provider} API error: {error_msg}")
            raise ProviderError(
                f"{self.provider} search failed ({error_msg})",
                provider=self.provider,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(
                f"{self.provider} returned a malformed response",
                provider=self.provider,
                status_code=response.status_code,
            ) from e

        if not isinstance(data, dict):
            raise ProviderError(
                f"{self.provider} returned a malformed response",
                provider=self.provider,
                status_code=response.status_code,
            )
        return data


def split_tags(tags) -> List[str]:
    """Normalize a provider tag field (string or list) into a list."""
    if not tags:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    elif not isinstance(tags, (list, tuple)):
        return []
    return [str(tag).strip() for tag in tags if str(tag).strip()]


def search_media(
    query: str,
    kind: MediaType,
    credentials,
    session: Optional[requests.Session] = None,
    per_page: Optional[int] = None,
) -> List[MediaResult]:
    """Search the provider that serves `kind`.

    Args:
        query: Free text or comma-separated keywords.
        kind: image and video go to Pixabay, audio to Freesound.
        credentials: `Credentials` for this request.
        session: Optional HTTP session.
        per_page: Optional page size override.
    """
    from .freesound import FreesoundClient
    from .pixabay import PixabayClient

    kind = MediaType(kind)
    if kind == MediaType.AUDIO:
        adapter = FreesoundClient(api_key=credentials.freesound_key, session=session, page_size=per_page)
    else:
        adapter = PixabayClient(api_key=credentials.pixabay_key, session=session, per_page=per_page)
    return adapter.search(query, kind)
