"""Parse the isolated payload into a referentially consistent graph."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from graphlens.models.schemas import NODE_TYPES, GraphData, GraphLink, GraphNode
from graphlens.pipeline.diagnostics import Diagnostics
from graphlens.utils.exceptions import GraphParseError
from graphlens.utils.text_processing import coerce_id


def narrow_to_object(candidate: str) -> str:
    """Trim ``candidate`` to the span between its first ``{`` and last ``}``."""
    first = candidate.find("{")
    last = candidate.rfind("}")
    if first != -1 and last != -1 and last > first:
        return candidate[first : last + 1]
    return candidate


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant {name}")


def _coerce_val(value: Any) -> float | None:
    """Finite float from a number or numeric string; None for anything else."""
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _build_node(raw: Mapping[str, Any], node_id: str, diagnostics: Diagnostics) -> GraphNode | None:
    fields = {str(k): v for k, v in raw.items() if not str(k).startswith("_")}
    fields["id"] = node_id
    fields["label"] = _text(raw.get("label")) or node_id
    fields["description"] = _text(raw.get("description"))
    fields["val"] = _coerce_val(raw.get("val"))
    if fields["val"] is None and raw.get("val") is not None:
        diagnostics.warn(
            "graph_node_val_invalid",
            f'Node "{node_id}" has unusable val; cleared',
            node_id=node_id,
        )

    node_type = raw.get("type")
    if not isinstance(node_type, str) or node_type not in NODE_TYPES:
        diagnostics.warn(
            "graph_node_unknown_type",
            f'Node "{node_id}" has unrecognised type {node_type!r}',
            node_id=node_id,
        )
    fields["type"] = node_type if isinstance(node_type, str) and node_type else "concept"

    try:
        return GraphNode.model_validate(fields)
    except ValidationError as exc:
        diagnostics.warn("graph_node_invalid", f'Dropping invalid node "{node_id}": {exc}', node_id=node_id)
        return None


def dedupe_nodes(raw_nodes: list[Any], diagnostics: Diagnostics) -> list[GraphNode]:
    """Keep the first node per string id; nodes without a usable id are dropped."""
    unique: dict[str, GraphNode] = {}
    for raw in raw_nodes:
        if not isinstance(raw, Mapping):
            diagnostics.warn("graph_node_malformed", f"Dropping malformed node entry {raw!r}")
            continue
        node_id = coerce_id(raw.get("id"))
        if node_id is None:
            diagnostics.warn("graph_node_missing_id", "Dropping node without an id")
            continue
        if node_id in unique:
            diagnostics.warn("graph_node_duplicate", f'Ignoring duplicate node "{node_id}"', node_id=node_id)
            continue
        node = _build_node(raw, node_id, diagnostics)
        if node is not None:
            unique[node_id] = node
    return list(unique.values())


def filter_edges(raw_edges: list[Any], node_ids: set[str], diagnostics: Diagnostics) -> list[GraphLink]:
    """Drop edges whose endpoints are not surviving node ids. Never repairs."""
    edges: list[GraphLink] = []
    for raw in raw_edges:
        if not isinstance(raw, Mapping):
            diagnostics.warn("graph_edge_malformed", f"Dropping malformed edge entry {raw!r}")
            continue
        source = coerce_id(raw.get("source"))
        target = coerce_id(raw.get("target"))
        if source not in node_ids or target not in node_ids:
            diagnostics.warn(
                "graph_edge_dropped",
                f'Filtering broken edge: "{source}" -> "{target}"',
                source=source,
                target=target,
            )
            continue
        fields = {str(k): v for k, v in raw.items() if not str(k).startswith("_")}
        fields.update(source=source, target=target, relation=_text(raw.get("relation")))
        edges.append(GraphLink.model_validate(fields))
    return edges


def sanitize_graph(
    candidate: str,
    *,
    has_sources: bool,
    diagnostics: Diagnostics | None = None,
) -> GraphData:
    """Turn a payload candidate into ``GraphData``.

    Raises:
        GraphParseError: the payload is not valid JSON and no sources were
            extracted, so there is nothing useful to return.
    """
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    narrowed = narrow_to_object(candidate)

    try:
        parsed = json.loads(narrowed, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        diagnostics.error(
            "graph_parse_failed",
            f"Failed to parse JSON: {exc}",
            payload_preview=narrowed[:200],
        )
        if has_sources:
            return GraphData()
        raise GraphParseError() from exc

    if (
        not isinstance(parsed, Mapping)
        or not isinstance(parsed.get("nodes"), list)
        or not isinstance(parsed.get("edges"), list)
    ):
        diagnostics.warn("graph_shape_invalid", "Invalid graph data structure, returning sources only.")
        return GraphData()

    nodes = dedupe_nodes(parsed["nodes"], diagnostics)
    edges = filter_edges(parsed["edges"], {n.id for n in nodes}, diagnostics)
    return GraphData(nodes=nodes, edges=edges)
