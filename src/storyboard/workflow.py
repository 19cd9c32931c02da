"""New-project workflow: plan, pick background audio, assemble."""

import logging
from typing import Any, Optional

import requests

from .agents import generate_scene_plan
from .assembler import ProjectAssembler
from .config import Credentials, PlanLimits
from .errors import StoryboardError
from .keywords import normalize_query
from .models import MediaResult, MediaType, Project, ScenePlan, ScenePlanRequest
from .services.freesound import FreesoundClient
from .storage import DocumentStore

logger = logging.getLogger(__name__)


def pick_background_audio(
    plan: ScenePlan,
    request: ScenePlanRequest,
    credentials: Credentials,
    session: Optional[requests.Session] = None,
) -> Optional[MediaResult]:
    """Return the top Freesound hit for the opening scene's audio keywords.

    Falls back to the prompt when the first scene has no audio keywords.
    Returns None without a Freesound key or when the search fails.
    """
    if not credentials.freesound_key:
        logger.debug("No Freesound key; skipping background audio")
        return None

    seed = (plan[0].audio_keywords if plan else "") or request.prompt
    if not normalize_query(seed):
        return None

    client = FreesoundClient(api_key=credentials.freesound_key, session=session, page_size=1)
    try:
        results = client.search(seed, MediaType.AUDIO)
    except StoryboardError as e:
        logger.warning(f"Failed to prefetch background audio: {e}")
        return None

    if not results:
        return None
    logger.info(f"Background audio: {results[0].title}")
    return results[0]


def create_project(
    request: ScenePlanRequest,
    owner: str,
    credentials: Credentials,
    store: DocumentStore,
    client: Optional[Any] = None,
    limits: Optional[PlanLimits] = None,
    session: Optional[requests.Session] = None,
) -> Project:
    """Generate a scene plan and store it as a new project.

    Raises:
        ValidationError: If the request fails its bounds.
        ConfigurationError: If the model key is missing or rejected.
        GenerationFailure: If no usable scenes come back.
        ModelUnavailable: If the model API cannot be reached.
        PersistenceError: If the project cannot be stored.
    """
    plan = generate_scene_plan(request, credentials=credentials, client=client, limits=limits)
    bg_audio = pick_background_audio(plan, request, credentials, session=session)
    return ProjectAssembler(store).assemble(request, plan, owner, global_bg_audio=bg_audio)
