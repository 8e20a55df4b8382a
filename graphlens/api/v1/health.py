"""Health and readiness endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from graphlens.api import dependencies

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "healthy"}


@router.get("/ready")
async def ready() -> dict:
    try:
        dependencies.get_graph_service()
    except Exception as exc:
        return {"status": "degraded", "model_client": False, "error": str(exc)}
    return {"status": "ready", "model_client": True}
