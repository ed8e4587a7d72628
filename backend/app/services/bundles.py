"""Lookup of Research Object bundles built for workflows."""
from __future__ import annotations

from pathlib import Path

from ..errors import BundleNotFound, WorkflowNotFound
from ..models.git import GitDetails
from .workflow_store import WorkflowRepository


class BundleService:
    """Locate the packaged bundle of a workflow on disk."""

    def __init__(self, repository: WorkflowRepository) -> None:
        self.repository = repository

    def get_ro_bundle(self, ref: GitDetails) -> Path:
        workflow = self.repository.find_by_source(ref)
        if workflow is None:
            raise WorkflowNotFound()
        if not workflow.ro_bundle:
            raise BundleNotFound()
        bundle = Path(workflow.ro_bundle).resolve()
        if not bundle.is_file():
            raise BundleNotFound()
        return bundle
