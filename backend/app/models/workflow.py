"""Workflow model definition."""

from __future__ import annotations

import io
from dataclasses import dataclass

from flask import current_app
from sqlalchemy.orm import validates

from ..cwl.elements import CWLElement, CWLStep
from ..extensions import db
from ..graph.dot_writer import DotWriter
from .git import GitDetails
from .types import ElementMap, StepMap


@dataclass(frozen=True)
class GraphResult:
    """Outcome of :meth:`Workflow.generate_graph`.

    When ``generated`` is false the previous graph was kept and ``error``
    describes the failure.
    """

    generated: bool
    error: str | None = None


class Workflow(db.Model):
    """A parsed CWL workflow retrieved from a git repository."""

    __tablename__ = "workflows"
    __table_args__ = (
        db.UniqueConstraint("repo_url", "branch", "path", "packed_id", name="uq_workflows_source"),
    )

    id = db.Column(db.Integer, primary_key=True)

    # Source reference, set once the workflow has been fetched
    repo_url = db.Column(db.String(255), nullable=False)
    branch = db.Column(db.String(128), nullable=False)
    path = db.Column(db.String(255), nullable=False)
    packed_id = db.Column(db.String(64), nullable=False, default="")
    retrieved_on = db.Column(db.DateTime, nullable=True)
    last_commit = db.Column(db.String(64), nullable=True, index=True)

    # Filesystem path of the Research Object bundle
    ro_bundle = db.Column(db.String(1024), nullable=True)

    label = db.Column(db.String(255), nullable=True)
    doc = db.Column(db.Text, nullable=True)
    inputs = db.Column(ElementMap, nullable=True)
    outputs = db.Column(ElementMap, nullable=True)
    steps = db.Column(StepMap, nullable=True)
    docker_link = db.Column(db.String(512), nullable=True)

    dot_graph = db.Column(db.Text, nullable=True)

    def __init__(
        self,
        label: str | None,
        doc: str | None,
        inputs: dict[str, CWLElement],
        outputs: dict[str, CWLElement],
        steps: dict[str, CWLStep],
        docker_link: str | None = None,
    ) -> None:
        super().__init__(
            label=label,
            doc=doc,
            inputs=inputs,
            outputs=outputs,
            steps=steps,
            docker_link=docker_link,
        )

    @property
    def retrieved_from(self) -> GitDetails | None:
        if self.repo_url is None:
            return None
        return GitDetails(
            repo_url=self.repo_url,
            branch=self.branch,
            path=self.path,
            packed_id=self.packed_id or None,
        )

    @retrieved_from.setter
    def retrieved_from(self, details: GitDetails) -> None:
        self.repo_url = details.repo_url
        self.branch = details.branch
        self.path = details.path
        self.packed_id = details.packed_id or ""

    @validates("last_commit")
    def _invalidate_graph(self, key: str, value: str | None) -> str | None:
        # A new upstream commit makes the cached graph stale.
        if self.last_commit and value != self.last_commit:
            self.dot_graph = None
        return value

    def generate_graph(self) -> GraphResult:
        """Create a DOT graph for this workflow and store it."""

        buffer = io.StringIO()
        try:
            DotWriter(buffer).write_graph(self)
        except OSError as exc:
            current_app.logger.error(
                "Failed to create DOT graph for workflow %s: %s", self.id, exc
            )
            return GraphResult(generated=False, error=str(exc))
        self.dot_graph = buffer.getvalue()
        return GraphResult(generated=True)

    def __repr__(self) -> str:  # pragma: no cover - repr not critical for tests
        return f"<Workflow {self.repo_url}/{self.path}@{self.last_commit}>"
