"""Project and settings persistence."""

from ..config import Config
from .base import DocumentStore
from .local import LocalDocumentStore


def create_store(config: Config) -> DocumentStore:
    """Build the document store selected by `config.store`."""
    config.validate_store()
    if config.store == "firestore":
        from .firestore import FirestoreDocumentStore

        return FirestoreDocumentStore(project_id=config.google_cloud_project)
    return LocalDocumentStore(config.workspace)


__all__ = ["DocumentStore", "LocalDocumentStore", "create_store"]
