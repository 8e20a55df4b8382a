"""Textual export of graph data (JSON, or the YAML-like block dump)."""

from __future__ import annotations

from typing import Literal

from graphlens.models.schemas import GraphData
from graphlens.utils.exceptions import ExportFormatError

ExportFormat = Literal["json", "yaml"]

_MEDIA_TYPES: dict[str, str] = {
    "json": "application/json",
    "yaml": "text/yaml",
}


def _quote(value: object) -> str:
    text = "" if value is None else str(value)
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n") + '"'


def _format_val(val: float) -> str:
    return str(int(val)) if val.is_integer() else repr(val)


def to_json(graph: GraphData) -> str:
    # pydantic writes non-finite floats in extra fields as null, keeping the output strict JSON
    return graph.model_dump_json(indent=2, exclude_none=True)


def to_yaml(graph: GraphData) -> str:
    """One block per node and per edge; the edges section is omitted when empty."""
    lines = ["# Knowledge Graph Data", "", "nodes:"]
    for node in graph.nodes:
        lines.append(f"  - id: {_quote(node.id)}")
        lines.append(f"    label: {_quote(node.label)}")
        lines.append(f"    type: {_quote(node.type)}")
        lines.append(f"    description: {_quote(node.description)}")
        if node.val:
            lines.append(f"    val: {_format_val(node.val)}")

    if graph.edges:
        lines.extend(["", "edges:"])
        for edge in graph.edges:
            lines.append(f"  - source: {_quote(edge.source)}")
            lines.append(f"    target: {_quote(edge.target)}")
            lines.append(f"    relation: {_quote(edge.relation)}")

    return "\n".join(lines) + "\n"


def export_graph(graph: GraphData, fmt: str) -> tuple[str, str, str]:
    """Return ``(content, media_type, extension)`` for ``fmt``.

    Raises:
        ExportFormatError: ``fmt`` is neither json nor yaml.
    """
    fmt = fmt.lower()
    if fmt == "json":
        content = to_json(graph)
    elif fmt == "yaml":
        content = to_yaml(graph)
    else:
        raise ExportFormatError(f"Unsupported export format '{fmt}'")
    return content, _MEDIA_TYPES[fmt], fmt
