"""Pixabay image and video search."""

from typing import Optional

import requests

from ..models import MediaResult, MediaType
from .media import MediaSearchAdapter, split_tags

# Largest first
VIDEO_VARIANTS = ("large", "medium", "small", "tiny")


class PixabayClient(MediaSearchAdapter):
    """Search adapter for Pixabay stock images and videos."""

    provider = "Pixabay"
    credential = "PIXABAY_API_KEY"
    supported = (MediaType.IMAGE, MediaType.VIDEO)
    results_key = "hits"

    IMAGE_URL = "https://pixabay.com/api/"
    VIDEO_URL = "https://pixabay.com/api/videos/"
    VIMEO_THUMBNAIL = "https://i.vimeocdn.com/video/{picture_id}_295x166.jpg"
    DEFAULT_IMAGE_PAGE_SIZE = 12
    DEFAULT_VIDEO_PAGE_SIZE = 8

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        per_page: Optional[int] = None,
    ) -> None:
        super().__init__(api_key=api_key, session=session, timeout=timeout)
        self._per_page = per_page

    def _build_request(self, query: str, kind: MediaType) -> tuple:
        params = {
            "key": self._api_key,
            "q": query,
            "safesearch": "true",
        }
        if kind == MediaType.VIDEO:
            params["per_page"] = self._per_page or self.DEFAULT_VIDEO_PAGE_SIZE
            return self.VIDEO_URL, params

        params["per_page"] = self._per_page or self.DEFAULT_IMAGE_PAGE_SIZE
        params["image_type"] = "photo"
        return self.IMAGE_URL, params

    def _map_hit(self, hit: dict, kind: MediaType) -> Optional[MediaResult]:
        if kind == MediaType.VIDEO:
            return self._map_video(hit)
        return self._map_image(hit)

    def _map_image(self, hit: dict) -> Optional[MediaResult]:
        url = hit.get("largeImageURL") or hit.get("webformatURL")
        if not url:
            return None
        return MediaResult(
            id=str(hit.get("id")),
            type=MediaType.IMAGE,
            title=hit.get("tags") or "Pixabay Image",
            url=url,
            preview_url=hit.get("previewURL") or None,
            tags=split_tags(hit.get("tags")),
        )

    def _map_video(self, hit: dict) -> Optional[MediaResult]:
        videos = hit.get("videos") or {}
        variant = next(
            (videos[name] for name in VIDEO_VARIANTS if (videos.get(name) or {}).get("url")),
            None,
        )
        if variant is None:
            return None

        preview = variant.get("thumbnail") or None
        if not preview and hit.get("picture_id"):
            preview = self.VIMEO_THUMBNAIL.format(picture_id=hit["picture_id"])

        return MediaResult(
            id=str(hit.get("id")),
            type=MediaType.VIDEO,
            title=hit.get("tags") or "Pixabay Video",
            url=variant["url"],
            preview_url=preview,
            duration_seconds=hit.get("duration"),
            tags=split_tags(hit.get("tags")),
        )
