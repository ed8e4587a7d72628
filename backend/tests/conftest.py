from __future__ import annotations

import pathlib
import sys
import tempfile
from collections.abc import Callable
from datetime import datetime

import pytest
from sqlalchemy.pool import StaticPool

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _load_dependencies():
    from app import Config, create_app
    from backend.app.extensions import db

    return Config, create_app, db


ConfigBase, create_app, db = _load_dependencies()


class TestConfig(ConfigBase):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite+pysqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {
        "poolclass": StaticPool,
        "connect_args": {"check_same_thread": False},
    }
    CORS_ALLOWED_ORIGINS = "http://localhost"
    RATELIMIT_ENABLED = False
    SPARQL_ENDPOINT = "http://sparql.invalid/query"
    GRAPH_CACHE_DIR = tempfile.mkdtemp(prefix="workflow-graphs-")


class FakeRdfStore:
    """In-memory RDF store keyed like the SPARQL store."""

    def __init__(self) -> None:
        self.graphs: dict[str, dict[object, bytes]] = {}
        self.queried: list[str] = []

    def add(self, key: str, models: dict[object, bytes]) -> None:
        self.graphs[key] = models

    def graph_exists(self, key: str) -> bool:
        self.queried.append(key)
        return key in self.graphs

    def get_model(self, key: str, syntax) -> bytes:
        return self.graphs[key][syntax]


class FakeRenderer:
    """Writes a placeholder file instead of calling Graphviz."""

    def __init__(self, directory: pathlib.Path) -> None:
        self.directory = directory
        self.calls: list[tuple[str, object]] = []

    def get_workflow_graph(self, output_format: str, ref) -> pathlib.Path:
        self.calls.append((output_format, ref))
        target = self.directory / f"rendered.{output_format}"
        target.write_bytes(f"graph as {output_format}".encode("utf-8"))
        return target


@pytest.fixture(scope="module")
def app():
    app = create_app(TestConfig)
    ctx = app.app_context()
    ctx.push()
    yield app
    db.session.remove()
    ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def clean_database(app):
    from backend.app.models.workflow import Workflow

    yield

    db.session.rollback()
    db.session.query(Workflow).delete()
    db.session.commit()


@pytest.fixture()
def services(app, tmp_path):
    from backend.app.services import (
        EXTENSION_KEY,
        BundleService,
        WorkflowRepository,
        WorkflowServices,
    )

    original = app.extensions[EXTENSION_KEY]
    repository = WorkflowRepository()
    fakes = WorkflowServices(
        repository=repository,
        rdf_store=FakeRdfStore(),
        renderer=FakeRenderer(tmp_path),
        bundles=BundleService(repository),
    )
    app.extensions[EXTENSION_KEY] = fakes
    yield fakes
    app.extensions[EXTENSION_KEY] = original


@pytest.fixture()
def workflow_factory(app) -> Callable[..., object]:
    from backend.app.cwl.elements import CWLElement, CWLStep
    from backend.app.models.git import GitDetails
    from backend.app.models.workflow import Workflow
    from backend.app.services.workflow_store import WorkflowRepository

    repository = WorkflowRepository()

    def factory(
        repo_url: str = "https://github.com/common-workflow-language/workflows.git",
        path: str = "workflows/hello/hello.cwl",
        commit: str = "abc123",
        branch: str = "master",
        packed_id: str | None = None,
        ro_bundle: str | None = None,
        with_graph: bool = True,
    ) -> Workflow:
        workflow = Workflow(
            label="Hello",
            doc="Prints a greeting",
            inputs={"message": CWLElement(label="Message", type="string")},
            outputs={"greeting": CWLElement(type="File", source_ids=["#echo/out"])},
            steps={
                "echo": CWLStep(
                    label="Echo",
                    run="echo.cwl",
                    inputs={"text": CWLElement(source_ids=["#message"])},
                    outputs={"out": CWLElement(type="File")},
                )
            },
        )
        workflow.retrieved_from = GitDetails(repo_url, branch, path, packed_id)
        workflow.retrieved_on = datetime(2024, 5, 1, 12, 0, 0)
        workflow.last_commit = commit
        workflow.ro_bundle = ro_bundle
        if with_graph:
            workflow.generate_graph()
        return repository.save(workflow)

    return factory
