"""Knowledge graph query orchestration around an injected model client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from graphlens.agent.prompts.graph_builder import GRAPH_BUILDER_SYSTEM_PROMPT, build_user_prompt
from graphlens.models.schemas import KnowledgeGraphResult
from graphlens.pipeline import process_model_output
from graphlens.pipeline._access import as_list, get_field
from graphlens.utils.logging import get_logger

logger = get_logger(__name__)

SOURCES_WITHOUT_GRAPH_MESSAGE = (
    "Search sources were found (see sidebar), but the AI could not generate a valid "
    "knowledge graph structure for this query. Please try a different or more specific topic."
)
NO_GRAPH_MESSAGE = "No knowledge graph could be generated. Please try a different query."


class ModelClient(Protocol):
    """The model-and-search provider. Returns the provider's raw response object."""

    async def generate(self, prompt: str, *, system_instruction: str) -> Any: ...


@dataclass
class RawModelResponse:
    text: str = ""
    grounding_chunks: list[Any] = field(default_factory=list)
    grounding_supports: list[Any] = field(default_factory=list)
    search_queries: list[Any] = field(default_factory=list)


def unpack_response(response: Any) -> RawModelResponse:
    """Pull text and grounding metadata out of a provider response.

    Accepts SDK objects (snake_case attributes) or their JSON form (camelCase).
    Only the first candidate's grounding metadata is read.
    """
    text = get_field(response, "text")
    candidates = as_list(get_field(response, "candidates"))
    metadata = get_field(candidates[0], "grounding_metadata", "groundingMetadata") if candidates else None

    return RawModelResponse(
        text=text if isinstance(text, str) else "",
        grounding_chunks=as_list(get_field(metadata, "grounding_chunks", "groundingChunks")),
        grounding_supports=as_list(get_field(metadata, "grounding_supports", "groundingSupports")),
        search_queries=as_list(get_field(metadata, "web_search_queries", "webSearchQueries")),
    )


def empty_graph_message(result: KnowledgeGraphResult) -> str | None:
    """User-facing hint when a result carries no nodes; None otherwise."""
    if result.graph_data.nodes:
        return None
    if result.sources:
        return SOURCES_WITHOUT_GRAPH_MESSAGE
    return NO_GRAPH_MESSAGE


class GraphService:
    """Runs one query through the model client and the normalization pipeline."""

    def __init__(self, client: ModelClient) -> None:
        self._client = client

    async def fetch_knowledge_graph(self, query: str) -> KnowledgeGraphResult:
        """Generate a grounded knowledge graph for ``query``.

        Client failures propagate untouched; retry policy belongs to the caller.

        Raises:
            ValueError: ``query`` is blank.
            GraphParseError: the response held no parseable graph and no sources.
        """
        if not query or not query.strip():
            raise ValueError("query must not be blank")

        try:
            response = await self._client.generate(
                build_user_prompt(query),
                system_instruction=GRAPH_BUILDER_SYSTEM_PROMPT,
            )
        except Exception as exc:
            logger.error("model_client_failed", query=query, error=str(exc))
            raise

        raw = unpack_response(response)
        logger.info(
            "grounding_metadata_received",
            query=query,
            chunks=len(raw.grounding_chunks),
            supports=len(raw.grounding_supports),
            search_queries=len(raw.search_queries),
        )
        return process_model_output(
            raw.text,
            raw.grounding_chunks,
            raw.grounding_supports,
            raw.search_queries,
        )
