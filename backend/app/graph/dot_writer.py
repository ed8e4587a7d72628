"""Write a workflow as a Graphviz DOT digraph."""
from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from ..cwl.elements import CWLElement, split_source

if TYPE_CHECKING:  # pragma: no cover - import for annotations only
    from ..models.workflow import Workflow

_GRAPH_ATTRIBUTES = {
    "bgcolor": "#eeeeee",
    "color": "black",
    "fontsize": "10",
    "labeljust": "left",
    "clusterrank": "local",
    "ranksep": "0.22",
    "nodesep": "0.05",
}
_NODE_ATTRIBUTES = {
    "fontname": "Helvetica",
    "fontsize": "10",
    "fontcolor": "black",
    "shape": "record",
    "height": "0",
    "width": "0",
    "color": "black",
    "fillcolor": "lightgoldenrodyellow",
    "style": "filled",
}
_EDGE_ATTRIBUTES = {
    "fontname": "Helvetica",
    "fontsize": "8",
    "fontcolor": "black",
    "color": "black",
    "arrowsize": "0.7",
}
_PORT_FILL = "#94DDF4"
_INDENT = "  "


def quote(value: str) -> str:
    """Return ``value`` as a quoted DOT identifier."""

    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def _attributes(values: dict[str, str]) -> str:
    return ", ".join(f"{key}={quote(value)}" for key, value in values.items())


class DotWriter:
    """Serialise the inputs, outputs and steps of a workflow to DOT."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def write_graph(self, workflow: "Workflow") -> None:
        inputs = workflow.inputs or {}
        outputs = workflow.outputs or {}
        steps = workflow.steps or {}

        self._line(0, "digraph workflow {")
        self._line(1, f"graph [{_attributes(_GRAPH_ATTRIBUTES)}];")
        self._line(1, f"node [{_attributes(_NODE_ATTRIBUTES)}];")
        self._line(1, f"edge [{_attributes(_EDGE_ATTRIBUTES)}];")

        if inputs:
            self._write_port_cluster("cluster_inputs", "Workflow Inputs", "in", inputs)
        if outputs:
            self._write_port_cluster("cluster_outputs", "Workflow Outputs", "out", outputs)

        for name, step in steps.items():
            label = step.label or name
            self._line(1, f"{quote(self._step_id(name))} [label={quote(label)}];")

        for name, step in steps.items():
            for port in step.inputs.values():
                self._write_edges(port, self._step_id(name))
        for name, port in outputs.items():
            self._write_edges(port, self._port_id("out", name))

        self._line(0, "}")

    def _write_port_cluster(
        self, cluster: str, label: str, prefix: str, ports: dict[str, CWLElement]
    ) -> None:
        self._line(1, f"subgraph {cluster} {{")
        self._line(2, 'rank="same";')
        self._line(2, 'style="dashed";')
        self._line(2, f"label={quote(label)};")
        for name, port in ports.items():
            attributes = {"label": port.label or name, "fillcolor": _PORT_FILL}
            self._line(2, f"{quote(self._port_id(prefix, name))} [{_attributes(attributes)}];")
        self._line(1, "}")

    def _write_edges(self, port: CWLElement, target: str) -> None:
        for source_id in port.source_ids:
            step, name = split_source(source_id)
            source = self._step_id(step) if step else self._port_id("in", name)
            self._line(1, f"{quote(source)} -> {quote(target)};")

    @staticmethod
    def _step_id(name: str) -> str:
        return f"step_{name}"

    @staticmethod
    def _port_id(prefix: str, name: str) -> str:
        return f"{prefix}_{name}"

    def _line(self, depth: int, text: str) -> None:
        self._stream.write(f"{_INDENT * depth}{text}\n")
