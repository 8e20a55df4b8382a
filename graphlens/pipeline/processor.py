"""Response normalization pipeline: raw model output in, consistent result out."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from graphlens.models.schemas import KnowledgeGraphResult
from graphlens.pipeline._access import as_list
from graphlens.pipeline.citations import extract_sources, link_supports
from graphlens.pipeline.diagnostics import Diagnostics
from graphlens.pipeline.payload import isolate_payload
from graphlens.pipeline.sanitizer import sanitize_graph
from graphlens.utils.logging import get_logger

logger = get_logger(__name__)


def process_model_output(
    text: str,
    grounding_chunks: Iterable[Any] | None = None,
    grounding_supports: Iterable[Any] | None = None,
    search_queries: Iterable[Any] | None = None,
    *,
    diagnostics: Diagnostics | None = None,
) -> KnowledgeGraphResult:
    """Normalize one raw model response into a ``KnowledgeGraphResult``.

    Pure and synchronous: no I/O and no state shared between calls.

    Args:
        text: Free-form response text with an embedded JSON graph.
        grounding_chunks: Raw grounding chunks, each optionally ``{"web": {"uri", "title"}}``.
        grounding_supports: Raw support spans mapping summary ranges to chunk indices.
        search_queries: Search queries the provider ran.
        diagnostics: Sink for warnings about skipped input. A fresh one is used if omitted.

    Raises:
        GraphParseError: the graph payload is unparseable and no sources were found.
    """
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    registry = extract_sources(grounding_chunks)
    supports = link_supports(grounding_supports, registry, diagnostics)
    sources = registry.sources()

    isolated = isolate_payload(text if isinstance(text, str) else "")
    graph = sanitize_graph(
        isolated.payload_candidate,
        has_sources=len(sources) > 0,
        diagnostics=diagnostics,
    )

    queries = [q for q in as_list(search_queries) if isinstance(q, str)]

    logger.debug(
        "model_output_processed",
        nodes=len(graph.nodes),
        edges=len(graph.edges),
        sources=len(sources),
        supports=len(supports),
        warnings=len(diagnostics.messages),
    )

    return KnowledgeGraphResult(
        graph_data=graph,
        sources=sources,
        search_queries=queries,
        summary=isolated.summary,
        grounding_supports=supports,
        warnings=list(diagnostics.messages),
    )
