"""Shared test fixtures for pipegc.

Provides in-memory SQLite engine, session, repository and namespace
fixtures, plus in-memory fakes of the collaborator protocols.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import Session, sessionmaker

from pipegc.exceptions import ActivityNotFoundError
from pipegc.models.activity import ActivityRecord
from pipegc.storage.engine import create_gc_engine, init_db
from pipegc.storage.sqlite import (
    SqliteActivityRepository,
    SqliteJobRepository,
    SqliteMetaRepository,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    """In-memory SQLite engine with all tables created."""
    eng = create_gc_engine(":memory:")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    """Session with automatic rollback after each test."""
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    sess = SessionLocal()
    yield sess
    sess.rollback()
    sess.close()


@pytest.fixture
def activity_repo(session: Session) -> SqliteActivityRepository:
    return SqliteActivityRepository(session)


@pytest.fixture
def job_repo(session: Session) -> SqliteJobRepository:
    return SqliteJobRepository(session)


@pytest.fixture
def meta_repo(session: Session) -> SqliteMetaRepository:
    return SqliteMetaRepository(session)


@pytest.fixture
def namespace():
    """In-memory Namespace, closed after the test."""
    from pipegc.namespace import Namespace

    ns = Namespace.open(":memory:")
    yield ns
    ns.close()


# ------------------------------------------------------------------
# Shared test helpers
# ------------------------------------------------------------------

def make_record(
    name: str,
    pipeline: str = "org/app/master",
    build: str | int = "1",
    completed_at: datetime | None = None,
) -> ActivityRecord:
    """Create an ActivityRecord with sensible defaults."""
    return ActivityRecord(
        name=name, pipeline=pipeline, build=str(build), completed_at=completed_at
    )


def make_pipeline(pipeline: str, builds, **kwargs) -> list[ActivityRecord]:
    """Create one record per build, named the way the store names them."""
    from pipegc.operations.retention import activity_name

    return [
        make_record(activity_name(pipeline, b), pipeline=pipeline, build=b, **kwargs)
        for b in builds
    ]


class FakeStore:
    """In-memory ActivityStore/JobRegistry/ModeDetector with call tracking."""

    def __init__(
        self,
        records: list[ActivityRecord] | None = None,
        *,
        jobs: list[str] | None = None,
        event_driven: bool = False,
        fail_on_delete: str | None = None,
    ) -> None:
        self.records = {r.name: r for r in records or []}
        self.jobs = list(jobs or [])
        self.event_driven = event_driven
        self.fail_on_delete = fail_on_delete
        self.deleted: list[str] = []
        self.job_list_calls = 0
        self.mode_calls = 0

    def list_activities(self) -> list[ActivityRecord]:
        return list(self.records.values())

    def delete_activity(self, name: str) -> None:
        if name == self.fail_on_delete:
            raise RuntimeError("connection reset")
        if name not in self.records:
            raise ActivityNotFoundError(name)
        del self.records[name]
        self.deleted.append(name)

    def list_known_job_names(self) -> list[str]:
        self.job_list_calls += 1
        return list(self.jobs)

    def is_event_driven(self) -> bool:
        self.mode_calls += 1
        return self.event_driven
