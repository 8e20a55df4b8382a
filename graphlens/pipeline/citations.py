"""Citation extraction and support linking.

Grounding chunks become a deduplicated, first-seen ordered list of sources;
grounding supports are passed through and tallied against those sources via
the positional chunk-index map.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from graphlens.models.schemas import (
    PLACEHOLDER_SOURCE_TITLE,
    GroundingSegment,
    GroundingSupport,
    Source,
)
from graphlens.pipeline._access import as_list, get_field, is_index, non_empty_str
from graphlens.pipeline.diagnostics import Diagnostics
from graphlens.utils.text_processing import normalize_uri


@dataclass
class _SourceEntry:
    title: str
    uri: str
    citation_count: int = 0


class SourceRegistry:
    """Sources keyed by normalized URI, iterated in first-seen order."""

    def __init__(self) -> None:
        self._entries: dict[str, _SourceEntry] = {}
        self._chunk_uris: dict[int, str] = {}

    def add_chunk(self, index: int, chunk: Any) -> bool:
        """Register the chunk at ``index``. Returns False when it carries no web URI."""
        web = get_field(chunk, "web")
        uri = non_empty_str(get_field(web, "uri"))
        if uri is None:
            return False

        key = normalize_uri(uri)
        title = non_empty_str(get_field(web, "title"))
        self._chunk_uris[index] = key

        entry = self._entries.get(key)
        if entry is None:
            self._entries[key] = _SourceEntry(title=title or PLACEHOLDER_SOURCE_TITLE, uri=uri)
        elif entry.title == PLACEHOLDER_SOURCE_TITLE and title:
            entry.title = title
        return True

    def cite(self, chunk_index: int) -> bool:
        """Count one citation of the chunk at ``chunk_index``; False if it maps to nothing."""
        key = self._chunk_uris.get(chunk_index)
        if key is None:
            return False
        self._entries[key].citation_count += 1
        return True

    @property
    def index_map(self) -> dict[int, str]:
        return dict(self._chunk_uris)

    def sources(self) -> list[Source]:
        return [
            Source(title=e.title, uri=e.uri, citation_count=e.citation_count)
            for e in self._entries.values()
        ]


def extract_sources(chunks: Iterable[Any] | None) -> SourceRegistry:
    """Build the source registry from raw grounding chunks.

    Chunks without a web URI (null, non-web, malformed) are skipped silently.
    """
    registry = SourceRegistry()
    for index, chunk in enumerate(as_list(chunks)):
        registry.add_chunk(index, chunk)
    return registry


def _coerce_support(raw: Any) -> tuple[GroundingSupport | None, list[Any]]:
    """Coerce one raw support; also returns the chunk indices that were not integers."""
    if raw is None or isinstance(raw, (str, bytes, int, float, bool)):
        return None, []

    raw_segment = get_field(raw, "segment")
    start = get_field(raw_segment, "startIndex", "start_index")
    end = get_field(raw_segment, "endIndex", "end_index")
    text = get_field(raw_segment, "text")
    segment = GroundingSegment(
        start_index=start if is_index(start) else 0,
        end_index=end if is_index(end) else 0,
        text=text if isinstance(text, str) else "",
    )

    raw_indices = as_list(get_field(raw, "groundingChunkIndices", "grounding_chunk_indices"))
    indices = [i for i in raw_indices if is_index(i)]
    dropped = [i for i in raw_indices if not is_index(i)]
    raw_scores = get_field(raw, "confidenceScores", "confidence_scores")
    scores = None
    if raw_scores is not None:
        scores = [
            float(s) for s in as_list(raw_scores)
            if isinstance(s, (int, float)) and not isinstance(s, bool)
        ]

    support = GroundingSupport(
        segment=segment,
        grounding_chunk_indices=indices,
        confidence_scores=scores,
    )
    return support, dropped


def link_supports(
    supports: Iterable[Any] | None,
    registry: SourceRegistry,
    diagnostics: Diagnostics | None = None,
) -> list[GroundingSupport]:
    """Tally citations onto ``registry`` and return the supports for rendering.

    Supports are not filtered by text range here; that happens at render time
    against the final summary. Every resolvable chunk index counts once, so a
    support citing the same chunk twice counts twice.
    """
    cleaned: list[GroundingSupport] = []
    for position, raw in enumerate(as_list(supports)):
        support, dropped = _coerce_support(raw)
        if support is None:
            if diagnostics is not None:
                diagnostics.warn(
                    "grounding_support_skipped",
                    f"Skipping malformed grounding support at position {position}",
                    position=position,
                )
            continue
        if dropped and diagnostics is not None:
            diagnostics.warn(
                "grounding_chunk_index_dropped",
                f"Ignoring non-integer chunk indices {dropped!r} in support at position {position}",
                position=position,
            )
        cleaned.append(support)
        for chunk_index in support.grounding_chunk_indices:
            registry.cite(chunk_index)
    return cleaned
