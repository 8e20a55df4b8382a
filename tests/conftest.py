"""Shared test fixtures."""

from __future__ import annotations

import json

import pytest


@pytest.fixture(autouse=True)
def _env_setup(monkeypatch):
    """Set environment variables for tests."""
    monkeypatch.setenv("GEMINI_MODEL", "test-model")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("LOG_FORMAT", "console")


@pytest.fixture
def settings():
    from graphlens.config import Settings

    return Settings(LOG_FORMAT="console")


@pytest.fixture
def graph_payload() -> dict:
    return {
        "nodes": [
            {"id": "1", "label": "Ada Lovelace", "type": "person", "description": "Mathematician", "val": 8},
            {"id": "2", "label": "Analytical Engine", "type": "product", "description": "Mechanical computer", "val": 6},
            {"id": "3", "label": "Charles Babbage", "type": "person", "description": "Inventor", "val": 7},
        ],
        "edges": [
            {"source": "1", "target": "2", "relation": "documented"},
            {"source": "3", "target": "2", "relation": "designed"},
        ],
    }


@pytest.fixture
def fenced_response(graph_payload) -> str:
    return (
        "Ada Lovelace wrote the first published algorithm. "
        "She worked with Charles Babbage.\n"
        "```json\n"
        f"{json.dumps(graph_payload, indent=2)}\n"
        "```\n"
        "Let me know if you need more detail."
    )


@pytest.fixture
def web_chunks() -> list[dict]:
    return [
        {"web": {"uri": "https://en.wikipedia.org/wiki/Ada_Lovelace", "title": "Ada Lovelace - Wikipedia"}},
        {"web": {"uri": "https://www.britannica.com/biography/Ada-Lovelace/", "title": "Britannica"}},
        {"web": {"uri": "https://en.wikipedia.org/wiki/Ada_Lovelace/", "title": "Duplicate"}},
    ]
