"""Shared fixtures and fakes."""

from datetime import datetime, timedelta, timezone

import pytest
import requests

from storyboard.config import Credentials
from storyboard.models import AspectRatio, PlannedScene, ScenePlanRequest
from storyboard.storage import LocalDocumentStore

RAINFOREST_PROMPT = (
    "A cinematic journey through a rainforest at dawn, showing mist, "
    "wildlife, and sunlight through canopy"
)


def scene_data(title, duration=15, **overrides):
    data = {
        "title": title,
        "narration": f"{title} unfolds slowly. The forest wakes around us.",
        "duration_seconds": duration,
        "visual_keywords": "rainforest, mist, dawn",
        "audio_keywords": "nature sounds",
    }
    data.update(overrides)
    return data


class FakeModelClient:
    """Stands in for AnthropicClient and records every call."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def create_structured(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Stands in for requests.Session; returns queued responses."""

    def __init__(self, *responses, error=None):
        self.responses = list(responses)
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def credentials():
    return Credentials(
        model_api_key="sk-test",
        pixabay_key="pixabay-test",
        freesound_key="freesound-test",
    )


@pytest.fixture
def rainforest_request():
    return ScenePlanRequest(
        prompt=RAINFOREST_PROMPT,
        aspect_ratio=AspectRatio.HORIZONTAL,
        target_duration_seconds=60,
        desired_scene_count=4,
    )


@pytest.fixture
def rainforest_plan():
    titles = ["Dawn Mist", "Canopy Light", "Wildlife Awakens", "Golden Rainforest"]
    return [PlannedScene.model_validate(scene_data(title)) for title in titles]


@pytest.fixture
def store(tmp_path):
    return LocalDocumentStore(tmp_path / "workspace")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
