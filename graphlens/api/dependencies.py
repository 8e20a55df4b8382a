"""Shared FastAPI dependency injection."""

from __future__ import annotations

from graphlens.services.graph_service import GraphService, ModelClient
from graphlens.utils.exceptions import ModelClientNotConfiguredError

_model_client: ModelClient | None = None
_graph_service: GraphService | None = None


def set_model_client(client: ModelClient | None) -> None:
    global _model_client, _graph_service
    _model_client = client
    _graph_service = GraphService(client) if client is not None else None


def get_graph_service() -> GraphService:
    if _graph_service is None:
        raise ModelClientNotConfiguredError("Model client not configured")
    return _graph_service
