"""Persistence access for workflow records."""
from __future__ import annotations

from ..errors import WorkflowConflict
from ..extensions import db
from ..models.git import GitDetails
from ..models.workflow import Workflow


class WorkflowRepository:
    """Look up and store :class:`Workflow` records.

    Source references are unique; :meth:`save` refuses a record whose source
    is already held by another one.
    """

    def find(self, workflow_id: int) -> Workflow | None:
        return db.session.get(Workflow, workflow_id)

    def find_by_source(self, ref: GitDetails) -> Workflow | None:
        return self._source_query(ref).first()

    def find_by_source_and_commit(self, ref: GitDetails, commit_id: str) -> Workflow | None:
        return self._source_query(ref).filter(Workflow.last_commit == commit_id).first()

    def find_by_commit_and_path(self, commit_id: str, path: str) -> Workflow | None:
        return (
            Workflow.query.filter(Workflow.last_commit == commit_id)
            .filter(Workflow.path == path)
            .order_by(Workflow.id.asc())
            .first()
        )

    def list_all(self) -> list[Workflow]:
        return Workflow.query.order_by(
            Workflow.retrieved_on.desc(), Workflow.id.desc()
        ).all()

    def save(self, workflow: Workflow) -> Workflow:
        ref = workflow.retrieved_from
        if ref is not None and not self._is_source_unique(ref, workflow.id):
            raise WorkflowConflict()
        db.session.add(workflow)
        db.session.commit()
        return workflow

    def delete(self, workflow: Workflow) -> None:
        db.session.delete(workflow)
        db.session.commit()

    @staticmethod
    def _source_query(ref: GitDetails):
        return Workflow.query.filter_by(
            repo_url=ref.repo_url,
            branch=ref.branch,
            path=ref.path,
            packed_id=ref.packed_id or "",
        )

    def _is_source_unique(self, ref: GitDetails, workflow_id: int | None) -> bool:
        query = self._source_query(ref)
        if workflow_id is not None:
            query = query.filter(Workflow.id != workflow_id)
        with db.session.no_autoflush:
            return not db.session.query(query.exists()).scalar()
