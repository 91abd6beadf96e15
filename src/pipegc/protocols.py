"""Protocol definitions for pipegc collaborators.

The retention run reads from an activity store, a job registry and a
mode detector, and writes deletions back to the activity store. Any
object with the right methods satisfies these protocols; the SQLite
backed :class:`~pipegc.namespace.Namespace` implements all three.

No SQLAlchemy imports allowed in this module -- pure domain protocols.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pipegc.models.activity import ActivityRecord


@runtime_checkable
class ActivityStore(Protocol):
    """Source of activity snapshots and target of deletions."""

    def list_activities(self) -> list[ActivityRecord]:
        """Return every stored activity."""
        ...

    def delete_activity(self, name: str) -> None:
        """Delete the activity called *name*.

        Raises:
            ActivityNotFoundError: If no activity has that name.
            CollaboratorError: For any other failure.
        """
        ...


@runtime_checkable
class JobRegistry(Protocol):
    """Authoritative list of the CI jobs that currently exist."""

    def list_known_job_names(self) -> list[str]:
        """Return the full name of every known pipeline job."""
        ...


@runtime_checkable
class ModeDetector(Protocol):
    """Tells whether the event-driven CI front end is in use.

    When it is, there is no job registry to compare activities against
    and orphan detection is skipped.
    """

    def is_event_driven(self) -> bool:
        ...
