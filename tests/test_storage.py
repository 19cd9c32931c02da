import itertools

import pytest

from storyboard.assembler import ProjectAssembler
from storyboard.config import Config
from storyboard.errors import ConfigurationError, PersistenceError
from storyboard.models import PollyEngine, SceneUpdate, TTSProvider, UserConfig
from storyboard.storage import LocalDocumentStore, create_store


def test_missing_settings_take_defaults(store):
    profile = store.get_user_config("alice")

    assert profile.model_api_key == ""
    assert profile.tts_provider == TTSProvider.GTTS
    assert profile.polly_engine == PollyEngine.GENERATIVE


def test_settings_are_merged(store):
    store.save_user_config("alice", UserConfig(model_api_key="sk-1", pixabay_key="p"))
    store.save_user_config("alice", UserConfig(tts_provider=TTSProvider.AMAZON_POLLY))

    profile = store.get_user_config("alice")

    assert profile.model_api_key == "sk-1"
    assert profile.pixabay_key == "p"
    assert profile.tts_provider == TTSProvider.AMAZON_POLLY
    assert profile.missing_polly_settings() == ["aws_access_key_id", "aws_secret_access_key", "aws_region"]


def test_projects_are_listed_newest_first(store, clock, rainforest_request, rainforest_plan):
    counter = itertools.count(1)
    assembler = ProjectAssembler(store, id_factory=lambda: f"id-{next(counter)}", clock=clock)
    first = assembler.assemble(rainforest_request, rainforest_plan, "alice")
    clock.advance(60)
    second = assembler.assemble(rainforest_request, rainforest_plan, "alice")
    assembler.assemble(rainforest_request, rainforest_plan, "bob")

    assert [project.id for project in store.list_projects("alice")] == [second.id, first.id]
    assert store.list_projects("nobody") == []


def test_unsafe_path_segments_are_rejected(store):
    with pytest.raises(PersistenceError):
        store.get_project("alice", "../../etc/passwd")
    with pytest.raises(PersistenceError):
        store.get_user_config(".hidden")


def test_malformed_document_is_a_persistence_error(store):
    file = store.root / "users" / "alice" / "projects" / "broken.yaml"
    file.parent.mkdir(parents=True)
    file.write_text("id: broken\nscenes: [\n")

    with pytest.raises(PersistenceError):
        store.get_project("alice", "broken")


def test_incomplete_document_is_a_persistence_error(store):
    file = store.root / "users" / "alice" / "projects" / "partial.yaml"
    file.parent.mkdir(parents=True)
    file.write_text("id: partial\nname: half a project\n")

    with pytest.raises(PersistenceError):
        store.get_project("alice", "partial")


def test_create_store_defaults_to_local(tmp_path):
    store = create_store(Config(workspace=tmp_path, store="local"))

    assert isinstance(store, LocalDocumentStore)
    assert store.root == tmp_path


def test_create_store_validates_backend(tmp_path):
    with pytest.raises(ConfigurationError):
        create_store(Config(workspace=tmp_path, store="postgres"))
    with pytest.raises(ConfigurationError):
        create_store(Config(workspace=tmp_path, store="firestore", google_cloud_project=""))


class FakeSnapshot:
    def __init__(self, data):
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return dict(self._data)


class FakeDocumentRef:
    def __init__(self, client, path):
        self._client = client
        self._path = path

    def get(self):
        self._client.record("get", self._path)
        return FakeSnapshot(self._client.documents.get(self._path))

    def set(self, data, merge=False):
        self._client.record("set", self._path, merge=merge)
        if merge:
            self._client.documents.setdefault(self._path, {}).update(data)
        else:
            self._client.documents[self._path] = dict(data)

    def delete(self):
        self._client.record("delete", self._path)
        self._client.documents.pop(self._path, None)


class FakeCollectionRef:
    def __init__(self, client, path):
        self._client = client
        self._path = path

    def stream(self):
        self._client.record("stream", self._path)
        for path, data in self._client.documents.items():
            if path[:-1] == self._path:
                yield FakeSnapshot(data)


class FakeFirestoreClient:
    """In-memory stand-in for firestore.Client."""

    def __init__(self, error=None):
        self.documents = {}
        self.calls = []
        self.error = error

    def record(self, op, path, **kwargs):
        self.calls.append((op, path, kwargs))
        if self.error is not None:
            raise self.error

    def document(self, *path):
        return FakeDocumentRef(self, path)

    def collection(self, *path):
        return FakeCollectionRef(self, path)


@pytest.fixture
def firestore_client():
    return FakeFirestoreClient()


@pytest.fixture
def firestore_store(firestore_client):
    from storyboard.storage.firestore import FirestoreDocumentStore

    return FirestoreDocumentStore(client=firestore_client)


def test_firestore_settings_are_merged(firestore_store, firestore_client):
    firestore_store.save_user_config("alice", UserConfig(model_api_key="sk-1"))
    firestore_store.save_user_config("alice", UserConfig(pixabay_key="p"))

    assert firestore_client.calls[0] == ("set", ("users", "alice"), {"merge": True})
    profile = firestore_store.get_user_config("alice")
    assert profile.model_api_key == "sk-1"
    assert profile.pixabay_key == "p"


def test_firestore_missing_documents(firestore_store):
    assert firestore_store.get_project("alice", "nope") is None
    assert firestore_store.get_user_config("alice") == UserConfig()


def test_firestore_project_documents(firestore_store, firestore_client, clock, rainforest_request, rainforest_plan):
    counter = itertools.count(1)
    assembler = ProjectAssembler(firestore_store, id_factory=lambda: f"id-{next(counter)}", clock=clock)
    project = assembler.assemble(rainforest_request, rainforest_plan, "alice")
    path = ("users", "alice", "projects", project.id)

    assert ("set", path, {"merge": False}) in firestore_client.calls
    assert firestore_store.get_project("alice", project.id) == project

    clock.advance(30)
    assembler.update_scene("alice", project.id, project.scenes[0].id, SceneUpdate(title="Morning Fog"))

    merge_call = firestore_client.calls[-1]
    assert merge_call[:2] == ("set", path)
    assert merge_call[2] == {"merge": True}
    assert firestore_client.documents[path]["scenes"][0]["title"] == "Morning Fog"
    assert set(firestore_client.documents[path]) >= {"scenes", "last_modified", "prompt"}

    assert [p.id for p in firestore_store.list_projects("alice")] == [project.id]
    assert ("stream", ("users", "alice", "projects"), {}) in firestore_client.calls

    firestore_store.delete_project("alice", project.id)
    assert firestore_store.get_project("alice", project.id) is None


@pytest.mark.parametrize(
    "operation",
    [
        lambda store: store.get_project("alice", "p1"),
        lambda store: store.get_user_config("alice"),
        lambda store: store.save_user_config("alice", UserConfig(model_api_key="k")),
        lambda store: store.merge_project("alice", "p1", {"name": "x"}),
        lambda store: store.list_projects("alice"),
        lambda store: store.delete_project("alice", "p1"),
    ],
)
def test_firestore_api_errors_are_persistence_errors(operation):
    from google.api_core.exceptions import ServiceUnavailable

    from storyboard.storage.firestore import FirestoreDocumentStore

    store = FirestoreDocumentStore(client=FakeFirestoreClient(error=ServiceUnavailable("backend down")))

    with pytest.raises(PersistenceError) as excinfo:
        operation(store)
    assert isinstance(excinfo.value.__cause__, ServiceUnavailable)
