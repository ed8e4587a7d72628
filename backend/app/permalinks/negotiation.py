"""Content negotiation for workflow permalinks."""
from __future__ import annotations

import enum

from werkzeug.datastructures import MIMEAccept

from ..errors import RepresentationNotFound


class Representation(enum.Enum):
    """Representations a permalink can resolve to, with their media types."""

    RAW = ("application/x-yaml", "application/octet-stream")
    VIEWER = ("text/html", "application/json")
    TURTLE = ("text/turtle",)
    JSON_LD = ("application/ld+json",)
    RDF_XML = ("application/rdf+xml",)
    SVG = ("image/svg+xml",)
    PNG = ("image/png",)
    XDOT = ("text/vnd+graphviz",)
    BUNDLE = ("application/vnd.wf4ever.robundle+zip", "application/zip")

    @property
    def media_types(self) -> tuple[str, ...]:
        return self.value


# Raw types are offered first so that a lone ``*/*`` resolves to the raw file.
_OFFERED: dict[str, Representation] = {
    media_type: representation
    for representation in Representation
    for media_type in representation.media_types
}


def negotiate(accept: MIMEAccept) -> tuple[Representation, str]:
    """Pick the representation best matching an ``Accept`` header."""

    if not accept:
        return Representation.RAW, "*/*"

    # Parameters such as ``charset`` do not select a representation.
    bare = MIMEAccept(
        [(value.split(";", 1)[0].strip(), quality) for value, quality in accept]
    )
    media_type = bare.best_match(list(_OFFERED))
    if media_type is None:
        raise RepresentationNotFound()
    return _OFFERED[media_type], media_type


def extract_path(path: str, start_slash: int) -> str:
    """Return what follows the ``start_slash``-th slash of ``path``.

    A trailing slash is dropped; ``/`` is returned when nothing follows.
    """

    index = -1
    for _ in range(start_slash):
        index = path.find("/", index + 1)
        if index == -1:
            return "/"

    remainder = path[index + 1:]
    if not remainder:
        return "/"
    if remainder.endswith("/"):
        remainder = remainder[:-1]
    return remainder
