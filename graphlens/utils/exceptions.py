"""Exception hierarchy for the graph response pipeline."""

from __future__ import annotations


class GraphLensError(Exception):
    """Base exception for all graphlens errors."""


class GraphParseError(GraphLensError):
    """The structured graph payload could not be parsed and nothing was salvageable."""

    def __init__(self, message: str = "Failed to parse knowledge graph data from AI response.") -> None:
        super().__init__(message)


class ModelClientError(GraphLensError):
    """The upstream model-and-search collaborator failed."""


class ModelClientNotConfiguredError(ModelClientError):
    """No model client has been registered with the application."""


class ExportFormatError(GraphLensError):
    """Requested export format is not supported."""
