"""Input, output and step descriptors of a parsed CWL workflow."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CWLElement:
    """A workflow or step port.

    ``source_ids`` hold the upstream identifiers feeding this port, either a
    workflow input (``name`` / ``#name``) or a step output (``step/output``).
    """

    label: str | None = None
    doc: str | None = None
    type: str | None = None
    format: str | None = None
    default: Any = None
    source_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "doc": self.doc,
            "type": self.type,
            "format": self.format,
            "default": self.default,
            "source_ids": list(self.source_ids),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "CWLElement":
        sources = payload.get("source_ids") or []
        if isinstance(sources, str):
            sources = [sources]
        return cls(
            label=payload.get("label"),
            doc=payload.get("doc"),
            type=payload.get("type"),
            format=payload.get("format"),
            default=payload.get("default"),
            source_ids=[str(source) for source in sources],
        )


@dataclass
class CWLStep:
    """A workflow step running a tool or nested workflow."""

    label: str | None = None
    doc: str | None = None
    run: str | None = None
    run_type: str | None = None
    inputs: dict[str, CWLElement] = field(default_factory=dict)
    outputs: dict[str, CWLElement] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "doc": self.doc,
            "run": self.run,
            "run_type": self.run_type,
            "inputs": element_map_to_dict(self.inputs),
            "outputs": element_map_to_dict(self.outputs),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "CWLStep":
        return cls(
            label=payload.get("label"),
            doc=payload.get("doc"),
            run=payload.get("run"),
            run_type=payload.get("run_type"),
            inputs=element_map_from_dict(payload.get("inputs")),
            outputs=element_map_from_dict(payload.get("outputs")),
        )


def element_map_to_dict(elements: dict[str, CWLElement] | None) -> dict[str, Any]:
    return {name: element.to_dict() for name, element in (elements or {}).items()}


def element_map_from_dict(payload: dict[str, Any] | None) -> dict[str, CWLElement]:
    return {name: CWLElement.from_dict(value or {}) for name, value in (payload or {}).items()}


def step_map_to_dict(steps: dict[str, CWLStep] | None) -> dict[str, Any]:
    return {name: step.to_dict() for name, step in (steps or {}).items()}


def step_map_from_dict(payload: dict[str, Any] | None) -> dict[str, CWLStep]:
    return {name: CWLStep.from_dict(value or {}) for name, value in (payload or {}).items()}


def split_source(source_id: str) -> tuple[str | None, str]:
    """Split a source identifier into ``(step, port)``.

    Workflow-level sources have no step and return ``(None, name)``.
    """

    parts = source_id.lstrip("#").split("/")
    if len(parts) > 1:
        return parts[-2], parts[-1]
    return None, parts[0]
