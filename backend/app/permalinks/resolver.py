"""Resolve commit permalinks to a representation of a workflow."""
from __future__ import annotations

from collections.abc import Callable
from http import HTTPStatus

from flask import Response, redirect, send_file

from ..errors import RepresentationNotFound, WorkflowNotFound
from ..models.git import strip_scheme
from ..models.workflow import Workflow
from ..services import WorkflowServices
from ..services.rdf_store import RdfSyntax
from .negotiation import Representation, extract_path

# Slashes preceding the workflow path in ``/git/<commit>/<path>``
PATH_START_SLASH = 3

_RDF_SYNTAXES = {
    Representation.TURTLE: RdfSyntax.TURTLE,
    Representation.JSON_LD: RdfSyntax.JSON_LD,
    Representation.RDF_XML: RdfSyntax.RDF_XML,
}

# Graphviz format and inline filename per image representation
_GRAPH_FORMATS = {
    Representation.SVG: ("svg", "graph.svg"),
    Representation.PNG: ("png", "graph.png"),
    Representation.XDOT: ("xdot", "graph.dot"),
}

Handler = Callable[[Workflow, str, Representation, str], Response]


class PermalinkResolver:
    """Dispatch a resolved workflow to the negotiated representation.

    The resolver keeps no state between requests; every branch delegates
    to one collaborator and lets its errors abort the request.
    """

    def __init__(self, services: WorkflowServices) -> None:
        self.services = services
        self._handlers: dict[Representation, Handler] = {
            Representation.VIEWER: self._viewer,
            Representation.RAW: self._raw,
            Representation.BUNDLE: self._bundle,
        }
        for representation in _RDF_SYNTAXES:
            self._handlers[representation] = self._rdf
        for representation in _GRAPH_FORMATS:
            self._handlers[representation] = self._graph

    def find_workflow(self, commit_id: str, path: str) -> Workflow:
        workflow = self.services.repository.find_by_commit_and_path(commit_id, path)
        if workflow is None or workflow.retrieved_from is None:
            raise WorkflowNotFound()
        return workflow

    def resolve(
        self,
        commit_id: str,
        request_path: str,
        representation: Representation,
        media_type: str,
    ) -> Response:
        path = extract_path(request_path, PATH_START_SLASH)
        workflow = self.find_workflow(commit_id, path)
        handler = self._handlers[representation]
        return handler(workflow, commit_id, representation, media_type)

    def _viewer(self, workflow: Workflow, commit_id: str, *_: object) -> Response:
        location = workflow.retrieved_from.internal_url(commit_id)
        return redirect(location, code=HTTPStatus.FOUND)

    def _raw(self, workflow: Workflow, commit_id: str, *_: object) -> Response:
        ref = workflow.retrieved_from
        if not ref.supports_raw_url:
            raise RepresentationNotFound()
        return redirect(ref.raw_url(commit_id), code=HTTPStatus.FOUND)

    def _rdf(
        self,
        workflow: Workflow,
        commit_id: str,
        representation: Representation,
        media_type: str,
    ) -> Response:
        key = strip_scheme(workflow.retrieved_from.canonical_url(commit_id))
        rdf_store = self.services.rdf_store
        if not rdf_store.graph_exists(key):
            raise WorkflowNotFound()
        syntax = _RDF_SYNTAXES[representation]
        return Response(rdf_store.get_model(key, syntax), mimetype=syntax.media_type)

    def _graph(
        self,
        workflow: Workflow,
        commit_id: str,
        representation: Representation,
        media_type: str,
    ) -> Response:
        output_format, filename = _GRAPH_FORMATS[representation]
        graph = self.services.renderer.get_workflow_graph(output_format, workflow.retrieved_from)
        return send_file(graph, mimetype=media_type, as_attachment=False, download_name=filename)

    def _bundle(
        self,
        workflow: Workflow,
        commit_id: str,
        representation: Representation,
        media_type: str,
    ) -> Response:
        bundle = self.services.bundles.get_ro_bundle(workflow.retrieved_from)
        return send_file(bundle, mimetype=media_type, as_attachment=True, download_name="bundle.zip")
