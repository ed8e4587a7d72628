"""Tests for media type negotiation and path extraction."""

from __future__ import annotations

import pytest
from werkzeug.datastructures import MIMEAccept
from werkzeug.http import parse_accept_header

from backend.app.errors import RepresentationNotFound
from backend.app.permalinks.negotiation import Representation, extract_path, negotiate


def _accept(header: str | None) -> MIMEAccept:
    return parse_accept_header(header, MIMEAccept)


@pytest.mark.parametrize(
    ("header", "representation", "media_type"),
    [
        ("text/html", Representation.VIEWER, "text/html"),
        ("application/json", Representation.VIEWER, "application/json"),
        ("text/html,application/xhtml+xml,*/*;q=0.8", Representation.VIEWER, "text/html"),
        ("application/x-yaml", Representation.RAW, "application/x-yaml"),
        ("application/octet-stream", Representation.RAW, "application/octet-stream"),
        ("*/*", Representation.RAW, "application/x-yaml"),
        ("text/turtle", Representation.TURTLE, "text/turtle"),
        ("application/ld+json", Representation.JSON_LD, "application/ld+json"),
        ("application/rdf+xml", Representation.RDF_XML, "application/rdf+xml"),
        ("image/svg+xml", Representation.SVG, "image/svg+xml"),
        ("image/png", Representation.PNG, "image/png"),
        ("text/vnd+graphviz", Representation.XDOT, "text/vnd+graphviz"),
        ("application/vnd.wf4ever.robundle+zip", Representation.BUNDLE, "application/vnd.wf4ever.robundle+zip"),
        ("application/zip", Representation.BUNDLE, "application/zip"),
        ("image/png;q=0.5, text/turtle", Representation.TURTLE, "text/turtle"),
        ("application/json;charset=UTF-8", Representation.VIEWER, "application/json"),
        ("text/turtle;charset=utf-8", Representation.TURTLE, "text/turtle"),
        ("text/html;level=1;q=0.2, image/png", Representation.PNG, "image/png"),
    ],
)
def test_negotiate(header, representation, media_type):
    assert negotiate(_accept(header)) == (representation, media_type)


def test_missing_accept_header_selects_raw():
    assert negotiate(_accept(None))[0] is Representation.RAW


def test_unsupported_media_type():
    with pytest.raises(RepresentationNotFound):
        negotiate(_accept("text/csv"))


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/git/abc123/workflows/hello.cwl", "workflows/hello.cwl"),
        ("/git/abc123/workflows/hello/", "workflows/hello"),
        ("/git/abc123/", "/"),
        ("/git/abc123", "/"),
    ],
)
def test_extract_path(path, expected):
    assert extract_path(path, 3) == expected
