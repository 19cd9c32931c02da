"""Google Cloud Firestore document store."""

import logging
from typing import List, Optional

from google.api_core import exceptions as google_exceptions
from google.cloud import firestore

from ..errors import PersistenceError
from .base import DocumentStore
from .base import DocumentPath

logger = logging.getLogger(__name__)


class FirestoreDocumentStore(DocumentStore):
    """Document store backed by Firestore.

    Each call is a single request; API errors become `PersistenceError`.
    """

    def __init__(
        self,
        project_id: Optional[str] = None,
        client: Optional[firestore.Client] = None,
    ) -> None:
        """Initialize the store.

        Args:
            project_id: Google Cloud project ID.
            client: Existing Firestore client. Created if not provided.
        """
        if client is None:
            try:
                client = firestore.Client(project=project_id)
            except google_exceptions.GoogleAPIError as e:
                logger.error(f"Failed to initialize Firestore client: {e}")
                raise PersistenceError(f"Could not connect to Firestore: {e}") from e
            logger.info(f"Initialized Firestore store for project {project_id}")
        self._client = client

    def _document(self, path: DocumentPath):
        return self._client.document(*path)

    def _get(self, path: DocumentPath) -> Optional[dict]:
        try:
            snapshot = self._document(path).get()
        except google_exceptions.GoogleAPICallError as e:
            raise PersistenceError(f"Could not read {'/'.join(path)}: {e}") from e
        if not snapshot.exists:
            return None
        return snapshot.to_dict()

    def _set(self, path: DocumentPath, data: dict) -> None:
        try:
            self._document(path).set(data)
        except google_exceptions.GoogleAPICallError as e:
            raise PersistenceError(f"Could not write {'/'.join(path)}: {e}") from e

    def _merge(self, path: DocumentPath, data: dict) -> None:
        try:
            self._document(path).set(data, merge=True)
        except google_exceptions.GoogleAPICallError as e:
            raise PersistenceError(f"Could not update {'/'.join(path)}: {e}") from e

    def _delete(self, path: DocumentPath) -> None:
        try:
            self._document(path).delete()
        except google_exceptions.GoogleAPICallError as e:
            raise PersistenceError(f"Could not delete {'/'.join(path)}: {e}") from e

    def _list(self, path: DocumentPath) -> List[dict]:
        try:
            return [snapshot.to_dict() for snapshot in self._client.collection(*path).stream()]
        except google_exceptions.GoogleAPICallError as e:
            raise PersistenceError(f"Could not list {'/'.join(path)}: {e}") from e
