"""Split a raw model response into its prose summary and the embedded graph payload."""

from __future__ import annotations

import re
from typing import NamedTuple

_JSON_FENCE = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL)
_ANY_FENCE = re.compile(r"```\s*(.*?)\s*```", re.DOTALL)


class IsolatedPayload(NamedTuple):
    summary: str
    payload_candidate: str


def isolate_payload(text: str) -> IsolatedPayload:
    """Locate the structured payload in ``text``.

    Precedence: a ```json fence, then any fence, then everything from the
    first ``{``, then the whole text. Whatever precedes the match is the
    summary. Never raises; models fence and wrap their output inconsistently.
    """
    if not text:
        return IsolatedPayload("", "")

    match = _JSON_FENCE.search(text) or _ANY_FENCE.search(text)
    if match:
        return IsolatedPayload(text[: match.start()].strip(), match.group(1))

    brace = text.find("{")
    if brace != -1:
        return IsolatedPayload(text[:brace].strip(), text[brace:])

    return IsolatedPayload("", text)
