from __future__ import annotations

"""tsdoc.utils.ids
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Tiny helpers for consistent identifiers: report file names, run ids and
script content digests.
"""

import hashlib
import re
import uuid
from datetime import datetime

__all__ = ["snake_case", "new_run_id", "content_digest"]

_PATTERN = re.compile(r"[^a-zA-Z0-9]+")


def snake_case(text: str) -> str:  # noqa: D401
    """Return *text* converted to ``snake_case``.

    * non‑alphanumeric chars become ``_``
    * multiple underscores are squeezed
    * leading/trailing underscores are stripped
    * everything lower‑cased
    """

    s = _PATTERN.sub("_", text)
    s = re.sub(r"_+", "_", s)
    return s.strip("_").lower()


def new_run_id() -> str:
    """Generate a unique run ID combining timestamp and UUID.

    Returns:
        A string in format 'YYYYMMDD-HHMMSS-[first 8 chars of UUID]'
    """
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    unique_id = str(uuid.uuid4())[:8]
    return f"{timestamp}-{unique_id}"


def content_digest(text: str) -> str:
    """SHA-256 hex digest of *text* (UTF-8), used to detect script changes."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
