"""Unit tests for the graph sanitizer."""

from __future__ import annotations

import json

import pytest

from graphlens.pipeline.diagnostics import Diagnostics
from graphlens.pipeline.sanitizer import narrow_to_object, sanitize_graph
from graphlens.utils.exceptions import GraphParseError


def _node(node_id, label="N", **extra) -> dict:
    return {"id": node_id, "label": label, "type": "concept", "description": "D", "val": 1, **extra}


@pytest.fixture
def diagnostics() -> Diagnostics:
    return Diagnostics(emit_logs=False)


def test_narrow_to_object_strips_prose():
    assert narrow_to_object('junk {"a": {"b": 1}} more junk') == '{"a": {"b": 1}}'


def test_narrow_to_object_leaves_unbalanced_text():
    assert narrow_to_object("} backwards {") == "} backwards {"
    assert narrow_to_object("no braces") == "no braces"


def test_single_node_self_loop(diagnostics):
    payload = json.dumps({
        "nodes": [_node("1", "A")],
        "edges": [{"source": "1", "target": "1", "relation": "self"}],
    })
    graph = sanitize_graph(payload, has_sources=False, diagnostics=diagnostics)

    assert len(graph.nodes) == 1
    assert len(graph.edges) == 1
    assert graph.edges[0].source == graph.edges[0].target == "1"


def test_duplicate_ids_first_wins(diagnostics):
    payload = json.dumps({
        "nodes": [_node("1", "A"), _node("1", "A - Duplicate")],
        "edges": [],
    })
    graph = sanitize_graph(payload, has_sources=False, diagnostics=diagnostics)

    assert len(graph.nodes) == 1
    assert graph.nodes[0].label == "A"


def test_ids_are_coerced_to_strings(diagnostics):
    payload = json.dumps({
        "nodes": [_node(1, "int"), _node("1", "str"), _node(2.0, "float")],
        "edges": [{"source": 1, "target": 2, "relation": "links"}],
    })
    graph = sanitize_graph(payload, has_sources=False, diagnostics=diagnostics)

    assert [n.id for n in graph.nodes] == ["1", "2"]
    assert graph.nodes[0].label == "int"
    assert graph.edges[0].source == "1"
    assert graph.edges[0].target == "2"


def test_nodes_without_id_are_dropped(diagnostics):
    payload = json.dumps({
        "nodes": [{"label": "no id"}, _node(""), _node(None), "not a node", _node("ok")],
        "edges": [],
    })
    graph = sanitize_graph(payload, has_sources=False, diagnostics=diagnostics)

    assert [n.id for n in graph.nodes] == ["ok"]


def test_dangling_edges_are_dropped(diagnostics):
    payload = json.dumps({
        "nodes": [_node("1"), _node("2")],
        "edges": [
            {"source": "1", "target": "2", "relation": "connected"},
            {"source": "1", "target": "999", "relation": "broken"},
            {"source": None, "target": "2", "relation": "nullish"},
            "junk",
        ],
    })
    graph = sanitize_graph(payload, has_sources=False, diagnostics=diagnostics)

    assert [e.relation for e in graph.edges] == ["connected"]
    assert any("Filtering broken edge" in m for m in diagnostics.messages)


def test_surviving_edges_reference_surviving_nodes(diagnostics):
    payload = json.dumps({
        "nodes": [_node("a"), _node("b"), _node("a"), {"id": ""}],
        "edges": [
            {"source": "a", "target": "b", "relation": "r1"},
            {"source": "b", "target": "c", "relation": "r2"},
            {"source": "", "target": "a", "relation": "r3"},
            {"source": "b", "target": "a", "relation": "r4"},
        ],
    })
    graph = sanitize_graph(payload, has_sources=False, diagnostics=diagnostics)
    ids = {n.id for n in graph.nodes}

    assert all(e.source in ids and e.target in ids for e in graph.edges)
    assert [e.relation for e in graph.edges] == ["r1", "r4"]


def test_sanitizing_is_idempotent(diagnostics, graph_payload):
    graph_payload["nodes"].append(dict(graph_payload["nodes"][0], label="dupe"))
    first = sanitize_graph(json.dumps(graph_payload), has_sources=False, diagnostics=diagnostics)
    second = sanitize_graph(first.model_dump_json(), has_sources=False, diagnostics=diagnostics)

    assert second == first


def test_extra_fields_survive(diagnostics):
    payload = json.dumps({
        "nodes": [_node("1", aliases=["x"])],
        "edges": [{"source": "1", "target": "1", "relation": "self", "weight": 0.5}],
    })
    graph = sanitize_graph(payload, has_sources=False, diagnostics=diagnostics)
    dumped = graph.model_dump()

    assert dumped["nodes"][0]["aliases"] == ["x"]
    assert dumped["edges"][0]["weight"] == 0.5


def test_unknown_type_is_kept_with_warning(diagnostics):
    payload = json.dumps({"nodes": [dict(_node("1"), type="animal")], "edges": []})
    graph = sanitize_graph(payload, has_sources=False, diagnostics=diagnostics)

    assert graph.nodes[0].type == "animal"
    assert any("unrecognised type" in m for m in diagnostics.messages)


def test_bad_val_is_cleared(diagnostics):
    payload = json.dumps({"nodes": [dict(_node("1"), val="high"), dict(_node("2"), val="7")], "edges": []})
    graph = sanitize_graph(payload, has_sources=False, diagnostics=diagnostics)

    assert graph.nodes[0].val is None
    assert graph.nodes[1].val == 7.0
    assert 'Node "1" has unusable val; cleared' in diagnostics.messages


def test_overflowing_val_is_cleared(diagnostics):
    payload = '{"nodes": [{"id": "big", "label": "Big", "type": "concept", "val": ' + "9" * 400 + '}], "edges": []}'
    graph = sanitize_graph(payload, has_sources=False, diagnostics=diagnostics)

    assert [n.id for n in graph.nodes] == ["big"]
    assert graph.nodes[0].val is None
    assert 'Node "big" has unusable val; cleared' in diagnostics.messages


@pytest.mark.parametrize("val", ["nan", "inf", "-Infinity", "1e400"])
def test_non_finite_val_strings_are_cleared(val, diagnostics):
    payload = json.dumps({"nodes": [dict(_node("1"), val=val)], "edges": []})
    graph = sanitize_graph(payload, has_sources=False, diagnostics=diagnostics)

    assert graph.nodes[0].val is None


@pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
def test_non_standard_json_constants_without_sources_are_fatal(constant, diagnostics):
    payload = '{"nodes": [{"id": "1", "label": "A", "type": "concept", "val": ' + constant + '}], "edges": []}'
    with pytest.raises(GraphParseError):
        sanitize_graph(payload, has_sources=False, diagnostics=diagnostics)


def test_overflowing_float_id_is_missing(diagnostics):
    payload = '{"nodes": [{"id": 1e400, "label": "Inf"}, {"id": "ok"}], "edges": [{"source": 1e400, "target": "ok"}]}'
    graph = sanitize_graph(payload, has_sources=False, diagnostics=diagnostics)

    assert [n.id for n in graph.nodes] == ["ok"]
    assert graph.edges == []


def test_non_standard_json_constant_id_with_sources_yields_empty_graph(diagnostics):
    graph = sanitize_graph('{"nodes": [{"id": NaN}], "edges": []}', has_sources=True, diagnostics=diagnostics)

    assert graph.nodes == []
    assert graph.edges == []
    assert any("Invalid JSON constant NaN" in m for m in diagnostics.messages)


def test_malformed_json_without_sources_is_fatal(diagnostics):
    with pytest.raises(GraphParseError, match="Failed to parse knowledge graph data"):
        sanitize_graph("{ nodes: [ ... incomplete ", has_sources=False, diagnostics=diagnostics)
    assert diagnostics.messages


def test_malformed_json_with_sources_yields_empty_graph(diagnostics):
    graph = sanitize_graph("{ nodes: [ ... incomplete ", has_sources=True, diagnostics=diagnostics)
    assert graph.nodes == []
    assert graph.edges == []


@pytest.mark.parametrize(
    "payload",
    [
        '{"foo": "bar"}',
        '{"nodes": [], "edges": {}}',
        '{"nodes": null, "edges": []}',
        "[1, 2, 3]",
        '"just a string"',
    ],
)
def test_invalid_shape_is_never_fatal(payload, diagnostics):
    graph = sanitize_graph(payload, has_sources=False, diagnostics=diagnostics)

    assert graph.nodes == []
    assert graph.edges == []
    assert "Invalid graph data structure, returning sources only." in diagnostics.messages


def test_prose_around_object_is_trimmed(diagnostics):
    candidate = 'Sure! {"nodes": [{"id": "x", "label": "X", "type": "event", "description": ""}], "edges": []} Done.'
    graph = sanitize_graph(candidate, has_sources=False, diagnostics=diagnostics)
    assert [n.id for n in graph.nodes] == ["x"]
