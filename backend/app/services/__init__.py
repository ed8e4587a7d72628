"""Collaborator services used to resolve workflow permalinks."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from flask import Flask, current_app

from ..models.git import GitDetails
from .bundles import BundleService
from .graph_renderer import GraphvizRenderer
from .rdf_store import RdfStore, SparqlRdfStore
from .workflow_store import WorkflowRepository

EXTENSION_KEY = "workflow_services"


class GraphRenderer(Protocol):
    def get_workflow_graph(self, output_format: str, ref: GitDetails) -> Path: ...


class BundleProvider(Protocol):
    def get_ro_bundle(self, ref: GitDetails) -> Path: ...


@dataclass
class WorkflowServices:
    """The stores and builders a permalink request may delegate to."""

    repository: WorkflowRepository
    rdf_store: RdfStore
    renderer: GraphRenderer
    bundles: BundleProvider


def init_services(app: Flask) -> WorkflowServices:
    """Build the default services from configuration and attach them to ``app``."""

    repository = WorkflowRepository()
    services = WorkflowServices(
        repository=repository,
        rdf_store=SparqlRdfStore(
            endpoint=app.config["SPARQL_ENDPOINT"],
            graph_base=app.config["RDF_GRAPH_BASE"],
            timeout=float(app.config.get("SPARQL_TIMEOUT", 10)),
        ),
        renderer=GraphvizRenderer(
            repository,
            cache_dir=app.config["GRAPH_CACHE_DIR"],
            dot_binary=app.config.get("GRAPHVIZ_DOT_BINARY", "dot"),
            timeout=float(app.config.get("GRAPHVIZ_TIMEOUT", 30)),
        ),
        bundles=BundleService(repository),
    )
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> WorkflowServices:
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    "BundleService",
    "GraphvizRenderer",
    "SparqlRdfStore",
    "WorkflowRepository",
    "WorkflowServices",
    "get_services",
    "init_services",
]
