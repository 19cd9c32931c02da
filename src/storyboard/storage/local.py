"""Local YAML-backed document store."""

import logging
import re
from pathlib import Path
from typing import List, Optional

import yaml

from ..errors import PersistenceError
from .base import DocumentStore
from .base import DocumentPath

logger = logging.getLogger(__name__)

_SAFE_SEGMENT = re.compile(r"^[A-Za-z0-9@_][A-Za-z0-9@_.\-]*$")


class LocalDocumentStore(DocumentStore):
    """Document store that keeps each document in a YAML file.

    `users/alice` is stored as `<root>/users/alice/profile.yaml` and
    `users/alice/projects/<id>` as `<root>/users/alice/projects/<id>.yaml`.
    """

    PROFILE_FILE = "profile.yaml"

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        """Return the workspace directory."""
        return self._root

    @staticmethod
    def _check(path: DocumentPath) -> None:
        for segment in path:
            if not _SAFE_SEGMENT.match(segment):
                raise PersistenceError(f"Invalid document path segment: '{segment}'")

    def _file(self, path: DocumentPath) -> Path:
        self._check(path)
        if len(path) == 2:
            return self._root.joinpath(*path, self.PROFILE_FILE)
        *parent, name = path
        return self._root.joinpath(*parent, f"{name}.yaml")

    def _get(self, path: DocumentPath) -> Optional[dict]:
        file = self._file(path)
        if not file.exists():
            return None
        return self._read(file)

    def _set(self, path: DocumentPath, data: dict) -> None:
        self._write(self._file(path), data)

    def _merge(self, path: DocumentPath, data: dict) -> None:
        file = self._file(path)
        current = self._read(file) if file.exists() else {}
        current.update(data)
        self._write(file, current)

    def _delete(self, path: DocumentPath) -> None:
        file = self._file(path)
        try:
            file.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Could not delete {file}: {e}") from e

    def _list(self, path: DocumentPath) -> List[dict]:
        self._check(path)
        directory = self._root.joinpath(*path)
        if not directory.is_dir():
            return []
        return [self._read(file) for file in sorted(directory.glob("*.yaml"))]

    def _read(self, file: Path) -> dict:
        try:
            with open(file, "r") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise PersistenceError(f"Could not read {file}: {e}") from e
        return data or {}

    def _write(self, file: Path, data: dict) -> None:
        try:
            file.parent.mkdir(parents=True, exist_ok=True)
            with open(file, "w") as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        except (OSError, yaml.YAMLError) as e:
            raise PersistenceError(f"Could not write {file}: {e}") from e
