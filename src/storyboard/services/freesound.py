"""Freesound audio search."""

from typing import Optional

import requests

from ..models import MediaResult, MediaType
from .media import MediaSearchAdapter, split_tags


class FreesoundClient(MediaSearchAdapter):
    """Search adapter for Freesound audio previews."""

    provider = "Freesound"
    credential = "FREESOUND_API_KEY"
    supported = (MediaType.AUDIO,)

    SEARCH_URL = "https://freesound.org/apiv2/search/text/"
    FIELDS = "id,name,previews,duration,tags"
    DEFAULT_PAGE_SIZE = 10

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        page_size: Optional[int] = None,
    ) -> None:
        super().__init__(api_key=api_key, session=session, timeout=timeout)
        self._page_size = page_size

    def _build_request(self, query: str, kind: MediaType) -> tuple:
        params = {
            "query": query,
            "fields": self.FIELDS,
            "token": self._api_key,
            "page_size": self._page_size or self.DEFAULT_PAGE_SIZE,
        }
        return self.SEARCH_URL, params

    def _map_hit(self, hit: dict, kind: MediaType) -> Optional[MediaResult]:
        previews = hit.get("previews") or {}
        url = previews.get("preview-hq-mp3") or previews.get("preview-lq-mp3")
        if not url:
            return None
        return MediaResult(
            id=str(hit.get("id")),
            type=MediaType.AUDIO,
            title=hit.get("name") or "Freesound Audio",
            url=url,
            preview_url=previews.get("preview-hq-ogg") or previews.get("preview-lq-ogg"),
            duration_seconds=hit.get("duration"),
            tags=split_tags(hit.get("tags")),
        )
