"""Abstract repository interfaces for pipegc storage.

Defines ABC interfaces for all database operations. No SQLAlchemy
imports here -- pure abstract contracts.

Concrete implementations are in sqlite.py.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from pipegc.storage.schema import ActivityRow, JobRow


class ActivityRepository(ABC):
    """Abstract interface for activity storage operations."""

    @abstractmethod
    def get(self, name: str) -> ActivityRow | None:
        """Get an activity by name. Returns None if not found."""
        ...

    @abstractmethod
    def save(self, activity: ActivityRow) -> None:
        """Save an activity, replacing any existing one with the same name."""
        ...

    @abstractmethod
    def list_all(self) -> Sequence[ActivityRow]:
        """Get all activities, ordered by pipeline then creation time."""
        ...

    @abstractmethod
    def delete(self, name: str) -> None:
        """Delete an activity by name.

        Raises ActivityNotFoundError if no activity has that name.
        """
        ...


class JobRepository(ABC):
    """Abstract interface for the job tree."""

    @abstractmethod
    def get(self, full_name: str) -> JobRow | None:
        """Get a job or folder by full name. Returns None if not found."""
        ...

    @abstractmethod
    def save(self, job: JobRow) -> None:
        """Save a job or folder."""
        ...

    @abstractmethod
    def list_all(self) -> Sequence[JobRow]:
        """Get every job and folder."""
        ...

    @abstractmethod
    def list_pipeline_names(self) -> list[str]:
        """Get the full names of all leaf jobs, descending into folders.

        Folders (jobs with children) are not reported themselves.
        """
        ...


class MetaRepository(ABC):
    """Abstract interface for database key/value metadata."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Get a metadata value. Returns None if unset."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Set a metadata value, overwriting any previous one."""
        ...
