"""tsdoc utilities."""

from .ids import snake_case, new_run_id, content_digest

__all__ = [
    "snake_case",
    "new_run_id",
    "content_digest",
]
