"""Project assembly, updates and export."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from pydantic import ValidationError as SchemaError

from .errors import PersistenceError, ValidationError
from .models import (
    MediaResult,
    Project,
    ProjectUpdate,
    RenderOptions,
    Scene,
    ScenePlan,
    ScenePlanRequest,
    SceneUpdate,
)
from .storage import DocumentStore

logger = logging.getLogger(__name__)

PROJECT_NAME_LENGTH = 50


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class ProjectAssembler:
    """Turns scene plans into stored projects and applies later edits.

    A project is one document; scenes are inline elements of it. Writes
    are synchronous and a failed write raises `PersistenceError`.
    """

    def __init__(
        self,
        store: DocumentStore,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._new_id = id_factory
        self._now = clock

    def assemble(
        self,
        request: ScenePlanRequest,
        plan: ScenePlan,
        owner: str,
        global_bg_audio: Optional[MediaResult] = None,
    ) -> Project:
        """Create and persist a project from a generated plan.

        Args:
            request: The request the plan was generated from.
            plan: Scenes in playback order.
            owner: Owner id the project is stored under.
            global_bg_audio: Optional background audio for the whole video.

        Returns:
            The stored project.
        """
        if not plan:
            raise ValidationError("Cannot assemble a project from an empty scene plan")

        now = self._now()
        scenes = [
            Scene(id=self._new_id(), **planned.model_dump())
            for planned in plan
        ]
        project = Project(
            id=self._new_id(),
            owner_id=owner,
            name=request.prompt.strip()[:PROJECT_NAME_LENGTH],
            prompt=request.prompt,
            aspect_ratio=request.aspect_ratio,
            target_duration_seconds=request.target_duration_seconds,
            desired_scene_count=request.desired_scene_count,
            scenes=scenes,
            global_bg_audio=global_bg_audio,
            creation_date=now,
            last_modified=now,
        )

        self._store.save_project(project)
        logger.info(f"Assembled project {project.id} with {len(scenes)} scenes")
        return project

    def load(self, owner: str, project_id: str) -> Project:
        """Load a project or raise if it does not exist."""
        project = self._store.get_project(owner, project_id)
        if project is None:
            raise PersistenceError(f"Project '{project_id}' not found")
        return project

    def update_scene(
        self,
        owner: str,
        project_id: str,
        scene_id: str,
        update: SceneUpdate,
    ) -> Project:
        """Apply the fields set on `update` to one scene.

        Only `scenes` and `last_modified` are written back.
        """
        project = self.load(owner, project_id)
        changes = update.model_dump(exclude_unset=True)

        scenes = []
        found = False
        for scene in project.scenes:
            if scene.id == scene_id:
                found = True
                try:
                    scene = Scene.model_validate({**scene.model_dump(), **changes})
                except SchemaError as e:
                    raise ValidationError(f"Invalid scene update: {e}") from e
            scenes.append(scene)

        if not found:
            raise PersistenceError(f"Scene '{scene_id}' not found in project '{project_id}'")

        project.scenes = scenes
        project.last_modified = self._now()
        document = project.to_document()
        self._store.merge_project(owner, project_id, {
            "scenes": document["scenes"],
            "last_modified": document["last_modified"],
        })
        logger.info(f"Updated scene {scene_id} ({', '.join(sorted(changes)) or 'no fields'})")
        return project

    def update_project(self, owner: str, project_id: str, update: ProjectUpdate) -> Project:
        """Apply the project-level fields set on `update`."""
        project = self.load(owner, project_id)
        changes = update.model_dump(exclude_unset=True)
        if "name" in changes and not (changes["name"] or "").strip():
            raise ValidationError("Project name cannot be empty")

        try:
            project = Project.model_validate({**project.model_dump(), **changes, "last_modified": self._now()})
        except SchemaError as e:
            raise ValidationError(f"Invalid project update: {e}") from e

        document = project.to_document()
        fields = {key: document.get(key) for key in changes}
        fields["last_modified"] = document["last_modified"]
        self._store.merge_project(owner, project_id, fields)
        return project

    def delete(self, owner: str, project_id: str) -> None:
        """Delete the whole project document."""
        self._store.delete_project(owner, project_id)


def export_payload(project: Project, options: Optional[RenderOptions] = None) -> dict:
    """Build the JSON payload handed to the rendering backend."""
    payload = project.to_document()
    payload["render_options"] = (options or RenderOptions()).to_payload()
    return payload
