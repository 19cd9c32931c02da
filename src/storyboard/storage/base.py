"""Document store abstraction."""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from pydantic import ValidationError as SchemaError

from ..errors import PersistenceError
from ..models import Project, UserConfig

logger = logging.getLogger(__name__)

USERS = "users"
PROJECTS = "projects"

DocumentPath = Tuple[str, ...]


class DocumentStore(ABC):
    """User-scoped document store.

    Documents live at `users/{owner}` (settings) and
    `users/{owner}/projects/{project_id}`. Every write is a single-document
    upsert; backends raise `PersistenceError` on failure and never retry.
    """

    # Raw document access, implemented per backend

    @abstractmethod
    def _get(self, path: DocumentPath) -> Optional[dict]:
        """Return the document at `path`, or None if it does not exist."""
        ...

    @abstractmethod
    def _set(self, path: DocumentPath, data: dict) -> None:
        """Create or replace the document at `path`."""
        ...

    @abstractmethod
    def _merge(self, path: DocumentPath, data: dict) -> None:
        """Merge top-level fields into the document at `path`, creating it if needed."""
        ...

    @abstractmethod
    def _delete(self, path: DocumentPath) -> None:
        """Remove the document at `path`. Missing documents are ignored."""
        ...

    @abstractmethod
    def _list(self, path: DocumentPath) -> List[dict]:
        """Return every document in the collection at `path`."""
        ...

    # Typed operations

    def get_user_config(self, owner: str) -> UserConfig:
        """Load an owner's settings; absent fields take their defaults."""
        data = self._get((USERS, owner)) or {}
        try:
            return UserConfig.model_validate(data)
        except SchemaError as e:
            raise PersistenceError(f"Stored settings for '{owner}' are malformed: {e}") from e

    def save_user_config(self, owner: str, profile: UserConfig) -> None:
        """Merge the fields set on `profile` into the owner's settings."""
        self._merge((USERS, owner), profile.model_dump(mode="json", exclude_unset=True))
        logger.info(f"Saved settings for {owner}")

    def save_project(self, project: Project) -> None:
        """Write the whole project document."""
        self._set(self._project_path(project.owner_id, project.id), project.to_document())
        logger.info(f"Saved project {project.id} ({len(project.scenes)} scenes)")

    def merge_project(self, owner: str, project_id: str, fields: dict) -> None:
        """Merge top-level fields into an existing project document."""
        self._merge(self._project_path(owner, project_id), fields)
        logger.debug(f"Merged {sorted(fields)} into project {project_id}")

    def get_project(self, owner: str, project_id: str) -> Optional[Project]:
        """Load a project, or None if it does not exist."""
        data = self._get(self._project_path(owner, project_id))
        if data is None:
            return None
        return self._to_project(data)

    def list_projects(self, owner: str) -> List[Project]:
        """Return the owner's projects, most recently modified first."""
        projects = [self._to_project(data) for data in self._list((USERS, owner, PROJECTS))]
        return sorted(projects, key=lambda project: project.last_modified, reverse=True)

    def delete_project(self, owner: str, project_id: str) -> None:
        """Delete a whole project document."""
        self._delete(self._project_path(owner, project_id))
        logger.info(f"Deleted project {project_id}")

    @staticmethod
    def _project_path(owner: str, project_id: str) -> DocumentPath:
        return (USERS, owner, PROJECTS, project_id)

    @staticmethod
    def _to_project(data: dict) -> Project:
        try:
            return Project.model_validate(data)
        except SchemaError as e:
            raise PersistenceError(f"Stored project '{data.get('id')}' is malformed: {e}") from e
