"""Error types raised while resolving workflows and their representations."""

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, jsonify


class PermalinkError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    message = "permalink resolution failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class WorkflowNotFound(PermalinkError):
    """Raised when no workflow (or RDF graph for it) matches the request."""

    status = HTTPStatus.NOT_FOUND
    message = "workflow not found"


class RepresentationNotFound(PermalinkError):
    """Raised when the negotiated representation cannot be produced."""

    status = HTTPStatus.NOT_ACCEPTABLE
    message = "representation not available for this workflow"


class BundleNotFound(PermalinkError):
    """Raised when a workflow has no Research Object bundle on disk."""

    status = HTTPStatus.NOT_FOUND
    message = "research object bundle not found"


class GraphNotGenerated(PermalinkError):
    """Raised when a graph image is requested before the DOT graph exists."""

    status = HTTPStatus.NOT_FOUND
    message = "workflow graph has not been generated"


class WorkflowConflict(PermalinkError):
    """Raised when a source reference is already held by another workflow."""

    status = HTTPStatus.CONFLICT
    message = "workflow with this source already exists"


class GraphRenderError(Exception):
    """Raised when Graphviz fails to render a workflow graph."""


def _handle_permalink_error(exc: PermalinkError):
    return jsonify({"error": str(exc)}), exc.status


def register_error_handlers(app: Flask) -> None:
    """Map the permalink error hierarchy onto JSON error responses."""

    app.register_error_handler(PermalinkError, _handle_permalink_error)
