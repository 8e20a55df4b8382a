"""Render-time citation helpers for the summary and source panel.

Support spans index into the summary text. Spans ending past the summary
point at content that was stripped out (the JSON block) and are ignored here.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from graphlens.models.schemas import PLACEHOLDER_SOURCE_TITLE, GroundingSupport, Source
from graphlens.utils.text_processing import favicon_url, get_domain


class AnnotatedSegment(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    text: str
    # 1-based citation markers; empty for uncited text
    citations: list[int] = Field(default_factory=list)


class SourceCard(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    number: int
    title: str
    uri: str
    domain: str
    favicon_url: str
    citation_count: int = 0
    verified: bool = False


def renderable_supports(summary: str, supports: Sequence[GroundingSupport]) -> list[GroundingSupport]:
    """Supports that fall inside ``summary``, ordered by start index."""
    ordered = sorted(supports, key=lambda s: s.segment.start_index)
    return [
        s for s in ordered
        if 0 <= s.segment.start_index <= s.segment.end_index <= len(summary)
    ]


def annotate_summary(summary: str, supports: Sequence[GroundingSupport]) -> list[AnnotatedSegment]:
    """Split ``summary`` into plain and cited segments.

    Citation numbers are the grounding chunk index plus one. Overlapping
    spans are clipped so no text is emitted twice.
    """
    if not summary:
        return []

    segments: list[AnnotatedSegment] = []
    last = 0
    for support in renderable_supports(summary, supports):
        start = max(support.segment.start_index, last)
        end = max(support.segment.end_index, start)
        if start > last:
            segments.append(AnnotatedSegment(text=summary[last:start]))
        segments.append(
            AnnotatedSegment(
                text=summary[start:end],
                citations=[i + 1 for i in support.grounding_chunk_indices],
            )
        )
        last = end

    if last < len(summary):
        segments.append(AnnotatedSegment(text=summary[last:]))
    return segments


def render_annotated_summary(summary: str, supports: Sequence[GroundingSupport]) -> str:
    """Markdown-ish rendering: cited text followed by ``[n]`` markers."""
    parts: list[str] = []
    for segment in annotate_summary(summary, supports):
        parts.append(segment.text)
        parts.extend(f"[{n}]" for n in segment.citations)
    return "".join(parts)


def source_display_title(source: Source) -> str:
    if source.title and source.title != PLACEHOLDER_SOURCE_TITLE:
        return source.title
    return get_domain(source.uri)


def source_cards(sources: Sequence[Source]) -> list[SourceCard]:
    return [
        SourceCard(
            number=i + 1,
            title=source_display_title(source),
            uri=source.uri,
            domain=get_domain(source.uri),
            favicon_url=favicon_url(source.uri),
            citation_count=source.citation_count,
            verified=source.citation_count > 0,
        )
        for i, source in enumerate(sources)
    ]
