"""Domain models for the retention subsystem.

Provides the deletion reason enum, the deletion plan produced by the
retention engine, and the result of an executed garbage collection run.
"""

from __future__ import annotations

import enum
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterator


class DeletionReason(str, enum.Enum):
    """Why an activity was selected for deletion."""

    AGE_EXPIRED = "age-expired"
    ORPHANED = "orphaned"
    OVER_LIMIT = "over-limit"

    def __repr__(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Deletion:
    """A single activity scheduled for deletion."""

    name: str
    reason: DeletionReason
    pipeline: str


@dataclass(frozen=True)
class DeletionPlan:
    """Ordered, duplicate-free sequence of deletions.

    Order is the order in which the retention passes discovered each
    target. It carries no meaning for correctness: deletions are
    independent of each other.
    """

    deletions: tuple[Deletion, ...] = ()

    @property
    def names(self) -> list[str]:
        return [d.name for d in self.deletions]

    def by_reason(self, reason: DeletionReason) -> list[Deletion]:
        """Return the deletions tagged with *reason*, in plan order."""
        return [d for d in self.deletions if d.reason == reason]

    def counts(self) -> dict[DeletionReason, int]:
        """Number of deletions per reason (every reason present, zero-filled)."""
        tally = Counter(d.reason for d in self.deletions)
        return {reason: tally.get(reason, 0) for reason in DeletionReason}

    def __len__(self) -> int:
        return len(self.deletions)

    def __iter__(self) -> Iterator[Deletion]:
        return iter(self.deletions)

    def __bool__(self) -> bool:
        return bool(self.deletions)

    def __contains__(self, name: object) -> bool:
        return any(d.name == name for d in self.deletions)


@dataclass(frozen=True)
class GCResult:
    """Result of a garbage collection run against an activity store.

    ``deleted`` lists what was actually removed; on a dry run it is empty
    and the plan shows what would have been removed.
    """

    plan: DeletionPlan = field(default_factory=DeletionPlan)
    deleted: tuple[str, ...] = ()
    skipped_not_found: tuple[str, ...] = ()
    activities_scanned: int = 0
    event_driven: bool = False
    dry_run: bool = False
    duration_seconds: float = 0.0

    @property
    def activities_removed(self) -> int:
        return len(self.deleted)
