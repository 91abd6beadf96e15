"""SQLite implementations of repository interfaces.

All repositories use SQLAlchemy 2.0-style queries (select() + session.execute()).
Each repository takes a Session in its constructor.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from pipegc.exceptions import ActivityNotFoundError
from pipegc.storage.repositories import (
    ActivityRepository,
    JobRepository,
    MetaRepository,
)
from pipegc.storage.schema import ActivityRow, JobRow, MetaRow


class SqliteActivityRepository(ActivityRepository):
    """SQLite implementation of activity repository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, name: str) -> ActivityRow | None:
        stmt = select(ActivityRow).where(ActivityRow.name == name)
        return self._session.execute(stmt).scalar_one_or_none()

    def save(self, activity: ActivityRow) -> None:
        self._session.merge(activity)
        self._session.flush()

    def list_all(self) -> Sequence[ActivityRow]:
        stmt = select(ActivityRow).order_by(
            ActivityRow.pipeline, ActivityRow.created_at, ActivityRow.name
        )
        return self._session.execute(stmt).scalars().all()

    def delete(self, name: str) -> None:
        row = self.get(name)
        if row is None:
            raise ActivityNotFoundError(name)
        self._session.delete(row)
        self._session.flush()


class SqliteJobRepository(JobRepository):
    """SQLite implementation of the job tree.

    Leaf jobs are pipelines; jobs with children are folders (an
    organisation, a repository with one job per branch, ...).
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, full_name: str) -> JobRow | None:
        stmt = select(JobRow).where(JobRow.full_name == full_name)
        return self._session.execute(stmt).scalar_one_or_none()

    def save(self, job: JobRow) -> None:
        self._session.merge(job)
        self._session.flush()

    def list_all(self) -> Sequence[JobRow]:
        stmt = select(JobRow).order_by(JobRow.full_name)
        return self._session.execute(stmt).scalars().all()

    def list_pipeline_names(self) -> list[str]:
        """Walk the job tree from its roots and collect leaf names.

        Loads every row once and walks the tree in memory instead of
        issuing one query per folder.
        """
        children: dict[str | None, list[str]] = {}
        for job in self.list_all():
            children.setdefault(job.parent_name, []).append(job.full_name)

        names: list[str] = []
        stack = list(reversed(children.get(None, [])))
        while stack:
            full_name = stack.pop()
            sub_jobs = children.get(full_name)
            if sub_jobs:
                stack.extend(reversed(sub_jobs))
            else:
                names.append(full_name)
        return names


class SqliteMetaRepository(MetaRepository):
    """SQLite implementation of key/value metadata."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, key: str) -> str | None:
        stmt = select(MetaRow).where(MetaRow.key == key)
        row = self._session.execute(stmt).scalar_one_or_none()
        return row.value if row is not None else None

    def set(self, key: str, value: str) -> None:
        self._session.merge(MetaRow(key=key, value=value))
        self._session.flush()
