"""Injectable sink for warnings about skipped or repaired input."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from graphlens.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Diagnostics:
    """Collects pipeline warnings and mirrors each one to the structured log.

    One instance per pipeline invocation; the collected messages end up on
    ``KnowledgeGraphResult.warnings``.
    """

    emit_logs: bool = True
    messages: list[str] = field(default_factory=list)

    def warn(self, event: str, message: str, **context: Any) -> None:
        self.messages.append(message)
        if self.emit_logs:
            logger.warning(event, detail=message, **context)

    def error(self, event: str, message: str, **context: Any) -> None:
        self.messages.append(message)
        if self.emit_logs:
            logger.error(event, detail=message, **context)
