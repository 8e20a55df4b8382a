"""Request/response models for the graph API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from graphlens.models.schemas import GroundingSupport, KnowledgeGraphResult, Source
from graphlens.services.annotation import AnnotatedSegment, SourceCard


class _Request(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProcessRequest(_Request):
    """A raw model response exactly as the provider returned it."""

    text: str = ""
    grounding_chunks: list[Any] = Field(default_factory=list)
    grounding_supports: list[Any] = Field(default_factory=list)
    search_queries: list[Any] = Field(default_factory=list)


class QueryRequest(_Request):
    query: str = Field(..., min_length=1, examples=["History of the transistor"])


class GraphResultResponse(_Request):
    result: KnowledgeGraphResult
    message: str | None = None
    node_count: int = 0
    edge_count: int = 0


class AnnotateRequest(_Request):
    summary: str = ""
    grounding_supports: list[GroundingSupport] = Field(default_factory=list)
    sources: list[Source] = Field(default_factory=list)


class AnnotateResponse(_Request):
    segments: list[AnnotatedSegment] = Field(default_factory=list)
    rendered: str = ""
    sources: list[SourceCard] = Field(default_factory=list)
