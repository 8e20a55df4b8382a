"""Graph API endpoints: normalize model responses, query, annotate and export."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from graphlens.api.dependencies import get_graph_service
from graphlens.api.v1.schemas.graph import (
    AnnotateRequest,
    AnnotateResponse,
    GraphResultResponse,
    ProcessRequest,
    QueryRequest,
)
from graphlens.config import get_settings
from graphlens.models.schemas import GraphData, KnowledgeGraphResult
from graphlens.pipeline import process_model_output
from graphlens.services.annotation import annotate_summary, render_annotated_summary, source_cards
from graphlens.services.export import export_graph
from graphlens.services.graph_service import GraphService, empty_graph_message
from graphlens.utils.exceptions import GraphParseError, ModelClientNotConfiguredError
from graphlens.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/graph", tags=["graph"])


def _to_response(result: KnowledgeGraphResult) -> GraphResultResponse:
    return GraphResultResponse(
        result=result,
        message=empty_graph_message(result),
        node_count=len(result.graph_data.nodes),
        edge_count=len(result.graph_data.edges),
    )


def _graph_service() -> GraphService:
    try:
        return get_graph_service()
    except ModelClientNotConfiguredError as exc:
        raise HTTPException(status_code=503, detail=str(exc))


@router.post("/process", response_model=GraphResultResponse)
async def process_response(request: ProcessRequest) -> GraphResultResponse:
    """Normalize a raw model response that the caller already fetched."""
    try:
        result = process_model_output(
            request.text,
            request.grounding_chunks,
            request.grounding_supports,
            request.search_queries,
        )
    except GraphParseError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return _to_response(result)


@router.post("/query", response_model=GraphResultResponse)
async def query_graph(
    request: QueryRequest,
    service: GraphService = Depends(_graph_service),
) -> GraphResultResponse:
    """Run a grounded search query through the configured model client."""
    try:
        result = await service.fetch_knowledge_graph(request.query)
    except (GraphParseError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except Exception as exc:
        logger.error("graph_query_failed", query=request.query, error=str(exc))
        raise HTTPException(status_code=502, detail=f"Model provider error: {exc}")
    return _to_response(result)


@router.post("/annotate", response_model=AnnotateResponse)
async def annotate(request: AnnotateRequest) -> AnnotateResponse:
    """Attach citation markers to a summary and build source panel entries."""
    return AnnotateResponse(
        segments=annotate_summary(request.summary, request.grounding_supports),
        rendered=render_annotated_summary(request.summary, request.grounding_supports),
        sources=source_cards(request.sources),
    )


@router.post("/export")
async def export(
    graph: GraphData,
    format: Literal["json", "yaml"] = "json",
) -> Response:
    """Export graph data as JSON or the YAML-like block dump."""
    content, media_type, extension = export_graph(graph, format)
    filename = f"{get_settings().EXPORT_FILENAME}.{extension}"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
