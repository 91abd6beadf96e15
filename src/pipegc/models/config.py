"""Configuration models for pipegc.

RetentionConfig holds the thresholds of one garbage collection run and
the caller's policy for deletions whose target has already vanished.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_REVISION_HISTORY_LIMIT = 5
DEFAULT_PULL_REQUEST_HOURS = 48


class RetentionConfig(BaseModel):
    """Thresholds for activity garbage collection."""

    model_config = {"frozen": True}

    revision_history_limit: int = Field(default=DEFAULT_REVISION_HISTORY_LIMIT, ge=0)
    """Minimum number of most recent activities kept per pipeline."""

    pull_request_hours: int = Field(default=DEFAULT_PULL_REQUEST_HOURS, ge=0)
    """Hours a completed pull-request activity is kept for."""

    ignore_not_found: bool = False
    """Treat a delete of an already-removed activity as success."""
