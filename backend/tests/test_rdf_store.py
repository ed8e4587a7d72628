"""Tests for the SPARQL backed RDF store."""

from __future__ import annotations

import pytest
import requests

from backend.app.services.rdf_store import RdfSyntax, SparqlRdfStore


class _FakeResponse:
    def __init__(self, payload=None, content: bytes = b"", status_code: int = 200):
        self._payload = payload or {}
        self.content = content
        self.status_code = status_code

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class _FakeSession:
    def __init__(self, response: _FakeResponse):
        self.response = response
        self.requests: list[dict[str, object]] = []

    def post(self, url, data=None, headers=None, timeout=None):
        self.requests.append({"url": url, "data": data, "headers": headers, "timeout": timeout})
        return self.response


def _store(response: _FakeResponse) -> tuple[SparqlRdfStore, _FakeSession]:
    session = _FakeSession(response)
    store = SparqlRdfStore(
        "http://sparql.example/query", "https://w3id.org/cwl/view/", timeout=3, session=session
    )
    return store, session


@pytest.mark.parametrize("answer", [True, False])
def test_graph_exists_asks_named_graph(answer):
    store, session = _store(_FakeResponse({"head": {}, "boolean": answer}))

    assert store.graph_exists("github.com/o/r/blob/abc/wf.cwl") is answer

    sent = session.requests[0]
    assert sent["url"] == "http://sparql.example/query"
    assert sent["headers"] == {"Accept": "application/sparql-results+json"}
    assert sent["timeout"] == 3
    assert "ASK WHERE { GRAPH <https://w3id.org/cwl/view/github.com/o/r/blob/abc/wf.cwl>" in sent["data"]["query"]


def test_get_model_requests_syntax():
    store, session = _store(_FakeResponse(content=b"<a> <b> <c> ."))

    body = store.get_model("github.com/o/r/blob/abc/wf.cwl", RdfSyntax.TURTLE)

    assert body == b"<a> <b> <c> ."
    assert session.requests[0]["headers"] == {"Accept": "text/turtle"}
    assert session.requests[0]["data"]["query"].startswith("CONSTRUCT")


def test_http_errors_propagate():
    store, _ = _store(_FakeResponse(status_code=503))

    with pytest.raises(requests.HTTPError):
        store.graph_exists("missing")
