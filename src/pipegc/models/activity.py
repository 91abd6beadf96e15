"""Activity domain model for pipegc.

ActivityRecord is the snapshot form of one executed CI pipeline run, as
returned by an activity store. Not an ORM model -- used for data transfer only.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, field_validator

PULL_REQUEST_MARKER = "-pr-"


class ActivityRecord(BaseModel):
    """One CI pipeline run.

    ``build`` stays text here; the retention engine converts it and fails
    the whole pass when it is not a non-negative integer.
    """

    model_config = {"frozen": True}

    name: str
    pipeline: str
    build: str
    completed_at: Optional[datetime] = None

    @field_validator("completed_at")
    @classmethod
    def _assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Naive timestamps are treated as UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def is_pull_request(self) -> bool:
        """True when the activity name carries the pull-request marker."""
        return PULL_REQUEST_MARKER in self.name

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def __str__(self) -> str:
        return f"{self.name} ({self.pipeline} #{self.build})"
