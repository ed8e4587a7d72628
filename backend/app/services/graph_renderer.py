"""Render workflow DOT graphs to images with the Graphviz ``dot`` binary."""
from __future__ import annotations

import hashlib
import os
import subprocess
from pathlib import Path

from flask import current_app

from ..errors import GraphNotGenerated, GraphRenderError, WorkflowNotFound
from ..models.git import GitDetails
from .workflow_store import WorkflowRepository

GRAPH_FORMATS = ("svg", "png", "xdot")


class GraphvizRenderer:
    """Render graph files, cached per workflow and DOT graph content."""

    def __init__(
        self,
        repository: WorkflowRepository,
        cache_dir: str | os.PathLike[str],
        dot_binary: str = "dot",
        timeout: float = 30.0,
    ) -> None:
        self.repository = repository
        self.cache_dir = Path(cache_dir).resolve()
        self.dot_binary = dot_binary
        self.timeout = timeout

    def get_workflow_graph(self, output_format: str, ref: GitDetails) -> Path:
        """Return the rendered graph of the workflow retrieved from ``ref``."""

        if output_format not in GRAPH_FORMATS:
            raise ValueError(f"unsupported graph format: {output_format}")

        workflow = self.repository.find_by_source(ref)
        if workflow is None:
            raise WorkflowNotFound()
        if not workflow.dot_graph:
            raise GraphNotGenerated()

        digest = hashlib.sha256(workflow.dot_graph.encode("utf-8")).hexdigest()[:16]
        target = self.cache_dir / f"{workflow.id}-{digest}.{output_format}"
        if target.exists():
            return target

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self._render(workflow.dot_graph, output_format, target)
        current_app.logger.info("Rendered %s graph for workflow %s", output_format, workflow.id)
        return target

    def _render(self, dot_graph: str, output_format: str, target: Path) -> None:
        partial = target.with_name(f"{target.name}.partial")
        try:
            completed = subprocess.run(
                [self.dot_binary, f"-T{output_format}", "-o", str(partial)],
                input=dot_graph,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise GraphRenderError(f"graphviz binary not found: {self.dot_binary}") from exc
        except subprocess.TimeoutExpired as exc:
            raise GraphRenderError(f"rendering exceeded {self.timeout} seconds") from exc

        if completed.returncode != 0:
            try:
                partial.unlink()
            except OSError:
                pass
            message = (completed.stderr or "").strip() or "graphviz failed"
            raise GraphRenderError(message)

        os.replace(partial, target)
