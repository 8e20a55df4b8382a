"""URI and identifier normalization helpers shared by the pipeline and renderers."""

from __future__ import annotations

import math
from typing import Any
from urllib.parse import urlparse


def normalize_uri(uri: str) -> str:
    """Strip a single trailing slash so ``https://a.io/`` and ``https://a.io`` collide."""
    return uri[:-1] if uri.endswith("/") else uri


def coerce_id(value: Any) -> str | None:
    """Coerce a raw node id or edge endpoint to its string form.

    Returns None for values that cannot identify a node (missing, empty,
    booleans, containers, non-finite numbers).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer():
            return str(int(value))
        return str(value)
    return None


def get_domain(uri: str) -> str:
    """Hostname of a URI without a leading ``www.``; the URI itself if unparseable."""
    try:
        host = urlparse(uri).hostname
    except ValueError:
        return uri
    if not host:
        return uri
    return host.replace("www.", "", 1)


def favicon_url(uri: str) -> str:
    try:
        host = urlparse(uri).hostname
    except ValueError:
        return ""
    if not host:
        return ""
    return f"https://www.google.com/s2/favicons?domain={host}&sz=32"
