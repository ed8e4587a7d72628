"""Commit-keyed permalinks resolved by content negotiation.

``GET /git/<commit>/<path>`` returns the viewer, the raw file, the RDF
description, the rendered graph or the Research Object bundle of a
workflow depending on the ``Accept`` header.
"""

from __future__ import annotations

from flask import Blueprint, Response, current_app, request

from ..extensions import limiter
from ..permalinks.negotiation import negotiate
from ..permalinks.resolver import PermalinkResolver
from ..services import get_services

bp = Blueprint("permalinks", __name__)


def _permalink_rate_limit() -> str:
    return current_app.config.get("PERMALINK_RATE_LIMIT", "120 per minute")


@bp.get("/git/<commit_id>/", defaults={"subpath": ""})
@bp.get("/git/<commit_id>/<path:subpath>")
@limiter.limit(_permalink_rate_limit)
def resolve_permalink(commit_id: str, subpath: str) -> Response:
    representation, media_type = negotiate(request.accept_mimetypes)
    resolver = PermalinkResolver(get_services())
    return resolver.resolve(commit_id, request.path, representation, media_type)
