"""Namespace -- the SQLite-backed activity store for pipegc.

Ties together storage and the garbage collector into a user-facing API.
A Namespace holds the activities of one CI installation, the tree of
jobs that still exist, and whether the event-driven front end is used.
It implements the ActivityStore, JobRegistry and ModeDetector protocols.

Not thread-safe.  Each thread should open its own ``Namespace``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from pipegc.models.activity import ActivityRecord
from pipegc.operations.gc import FixedMode, gc_activities as _gc_activities
from pipegc.storage.engine import create_gc_engine, create_session_factory, init_db
from pipegc.storage.schema import ActivityRow, JobRow
from pipegc.storage.sqlite import (
    SqliteActivityRepository,
    SqliteJobRepository,
    SqliteMetaRepository,
)

if TYPE_CHECKING:
    from sqlalchemy import Engine
    from sqlalchemy.orm import Session

    from pipegc.models.config import RetentionConfig
    from pipegc.models.retention import GCResult

logger = logging.getLogger(__name__)

_EVENT_DRIVEN_KEY = "event_driven"


def _to_naive_utc(dt: datetime | None) -> datetime | None:
    """SQLite DateTime columns hold naive UTC values."""
    if dt is None or dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def _to_record(row: ActivityRow) -> ActivityRecord:
    return ActivityRecord(
        name=row.name,
        pipeline=row.pipeline,
        build=row.build,
        completed_at=row.completed_at,
    )


class Namespace:
    """Activity store, job registry and mode flag backed by one database.

    Create a namespace via :meth:`Namespace.open`.

    Example::

        with Namespace.open("ci.db") as ns:
            ns.register_job("org/app/master")
            ns.add_activity("org-app-master-1", "org/app/master", 1)
            result = ns.gc_activities()
    """

    def __init__(
        self,
        *,
        engine: Engine | None,
        session: Session,
        activity_repo: SqliteActivityRepository,
        job_repo: SqliteJobRepository,
        meta_repo: SqliteMetaRepository,
    ) -> None:
        self._engine = engine
        self._session = session
        self._activity_repo = activity_repo
        self._job_repo = job_repo
        self._meta_repo = meta_repo
        self._closed = False
        self._in_gc = False

    @classmethod
    def open(
        cls,
        path: str = ":memory:",
        *,
        url: str | None = None,
    ) -> Namespace:
        """Open (or create) a namespace database.

        Args:
            path: SQLite path.  ``":memory:"`` for in-memory (default).
            url: Full SQLAlchemy URL; overrides *path* when given.
        """
        engine = create_gc_engine(path, url=url)
        init_db(engine)
        session = create_session_factory(engine)()
        return cls(
            engine=engine,
            session=session,
            activity_repo=SqliteActivityRepository(session),
            job_repo=SqliteJobRepository(session),
            meta_repo=SqliteMetaRepository(session),
        )

    def close(self) -> None:
        """Close the session and dispose the engine."""
        if self._closed:
            return
        self._closed = True
        self._session.close()
        if self._engine is not None:
            self._engine.dispose()

    def __enter__(self) -> Namespace:
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Namespace(closed={self._closed})"

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------

    def add_activity(
        self,
        name: str,
        pipeline: str,
        build: int | str,
        *,
        completed_at: datetime | None = None,
        created_at: datetime | None = None,
    ) -> ActivityRecord:
        """Store an activity, replacing any existing one with the same name.

        *build* is stored as given; a non-numeric value is accepted here
        and only rejected when garbage collection runs.
        """
        row = ActivityRow(
            name=name,
            pipeline=pipeline,
            build=str(build),
            completed_at=_to_naive_utc(completed_at),
            created_at=_to_naive_utc(created_at or datetime.now(timezone.utc)),
        )
        self._activity_repo.save(row)
        self._session.commit()
        return _to_record(row)

    def get_activity(self, name: str) -> ActivityRecord | None:
        row = self._activity_repo.get(name)
        return _to_record(row) if row is not None else None

    def list_activities(self) -> list[ActivityRecord]:
        return [_to_record(row) for row in self._activity_repo.list_all()]

    def delete_activity(self, name: str) -> None:
        """Delete one activity.

        Committed immediately, except during :meth:`gc_activities`, which
        commits all of its deletions together.

        Raises:
            ActivityNotFoundError: If no activity has that name.
        """
        self._activity_repo.delete(name)
        if not self._in_gc:
            self._session.commit()

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def register_job(self, full_name: str) -> None:
        """Register a job by its slash-separated full name.

        Missing parent folders are created, so registering
        ``"org/app/master"`` also records folders ``org`` and ``org/app``.
        """
        parent: str | None = None
        path: list[str] = []
        for part in full_name.split("/"):
            path.append(part)
            current = "/".join(path)
            if self._job_repo.get(current) is None:
                self._job_repo.save(
                    JobRow(
                        full_name=current,
                        parent_name=parent,
                        created_at=_to_naive_utc(datetime.now(timezone.utc)),
                    )
                )
            parent = current
        self._session.commit()

    def list_known_job_names(self) -> list[str]:
        """Full names of all pipeline jobs (folders are descended into)."""
        return self._job_repo.list_pipeline_names()

    # ------------------------------------------------------------------
    # Mode
    # ------------------------------------------------------------------

    def set_event_driven(self, enabled: bool) -> None:
        """Record whether the event-driven CI front end is in use."""
        self._meta_repo.set(_EVENT_DRIVEN_KEY, "true" if enabled else "false")
        self._session.commit()

    def is_event_driven(self) -> bool:
        return self._meta_repo.get(_EVENT_DRIVEN_KEY) == "true"

    # ------------------------------------------------------------------
    # Garbage collection
    # ------------------------------------------------------------------

    def gc_activities(
        self,
        *,
        config: RetentionConfig | None = None,
        now: datetime | None = None,
        dry_run: bool = False,
        event_driven: bool | None = None,
    ) -> GCResult:
        """Garbage-collect activities in this namespace.

        Deletions are committed together once the whole plan has run; if
        any deletion fails none of them are kept.

        Args:
            config: Retention thresholds.  Defaults created if *None*.
            now: Current time override.
            dry_run: Compute the plan without deleting anything.
            event_driven: Override the stored front end mode flag.

        Returns:
            :class:`GCResult` describing the run.
        """
        mode = self if event_driven is None else FixedMode(event_driven)
        self._in_gc = True
        try:
            result = _gc_activities(
                self, self, mode, config=config, now=now, dry_run=dry_run,
            )
        except Exception:
            logger.warning("activity garbage collection failed, rolling back deletions")
            self._session.rollback()
            raise
        finally:
            self._in_gc = False
        self._session.commit()
        return result
