"""Pydantic models for the data flowing out of the response pipeline."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PLACEHOLDER_SOURCE_TITLE = "Unknown Source"

NODE_TYPES: frozenset[str] = frozenset(
    ("person", "organization", "place", "event", "creativeWork", "product", "concept")
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ── Citations ────────────────────────────────────────────────────────


class Source(_CamelModel):
    title: str = PLACEHOLDER_SOURCE_TITLE
    uri: str
    citation_count: int = Field(default=0, ge=0)


class GroundingSegment(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore")

    start_index: int = 0
    end_index: int = 0
    text: str = ""


class GroundingSupport(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore")

    segment: GroundingSegment = Field(default_factory=GroundingSegment)
    grounding_chunk_indices: list[int] = Field(default_factory=list)
    confidence_scores: list[float] | None = None


# ── Graph ────────────────────────────────────────────────────────────


class GraphNode(BaseModel):
    """A graph vertex. Extra keys from the model response are preserved."""

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str = Field(..., min_length=1)
    label: str = ""
    type: str = "concept"
    description: str = ""
    val: float | None = Field(default=None, allow_inf_nan=False)


class GraphLink(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    source: str
    target: str
    relation: str = ""


class GraphData(BaseModel):
    model_config = ConfigDict(frozen=True)

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphLink] = Field(default_factory=list)


# ── Pipeline output ──────────────────────────────────────────────────


class KnowledgeGraphResult(_CamelModel):
    """The sole output of the pipeline. Replaces any earlier result wholesale."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    graph_data: GraphData = Field(default_factory=GraphData)
    sources: list[Source] = Field(default_factory=list)
    search_queries: list[str] = Field(default_factory=list)
    summary: str = ""
    grounding_supports: list[GroundingSupport] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
