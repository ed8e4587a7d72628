"""Access to the RDF descriptions of workflows held in a SPARQL store."""
from __future__ import annotations

import enum
from typing import Protocol

import requests


class RdfSyntax(enum.Enum):
    """Serialisations the store can return, with their media types."""

    TURTLE = "text/turtle"
    JSON_LD = "application/ld+json"
    RDF_XML = "application/rdf+xml"

    @property
    def media_type(self) -> str:
        return self.value


class RdfStore(Protocol):
    def graph_exists(self, key: str) -> bool: ...

    def get_model(self, key: str, syntax: RdfSyntax) -> bytes: ...


class SparqlRdfStore:
    """RDF store backed by a SPARQL 1.1 query endpoint.

    Each workflow lives in its own named graph ``graph_base + key``.
    """

    def __init__(
        self,
        endpoint: str,
        graph_base: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.graph_base = graph_base
        self.timeout = timeout
        self._session = session or requests.Session()

    def graph_iri(self, key: str) -> str:
        return f"{self.graph_base}{key}"

    def graph_exists(self, key: str) -> bool:
        query = f"ASK WHERE {{ GRAPH <{self.graph_iri(key)}> {{ ?s ?p ?o }} }}"
        response = self._query(query, "application/sparql-results+json")
        return bool(response.json().get("boolean"))

    def get_model(self, key: str, syntax: RdfSyntax) -> bytes:
        query = (
            "CONSTRUCT { ?s ?p ?o } "
            f"WHERE {{ GRAPH <{self.graph_iri(key)}> {{ ?s ?p ?o }} }}"
        )
        return self._query(query, syntax.media_type).content

    def _query(self, query: str, accept: str) -> requests.Response:
        response = self._session.post(
            self.endpoint,
            data={"query": query},
            headers={"Accept": accept},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response
