"""Retention policy for pipeline activities.

Decides which activities to delete, using three independent passes over
an immutable snapshot:

1. Age expiry: completed pull-request activities older than
   ``pr_hours`` hours.
2. Orphans: activities whose pipeline is no longer a known job. Only run
   when a job list is supplied.
3. Revision cap: per pipeline, every build except the ``revision_limit``
   most recent ones.

Records marked by pass 1 are not re-examined by pass 2, and records
marked by either are left out of the pass 3 grouping. Nothing here
performs I/O; executing the plan is the caller's job.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from datetime import datetime, timedelta, timezone

from pipegc.exceptions import BuildNumberError, ConfigError
from pipegc.models.activity import ActivityRecord
from pipegc.models.retention import Deletion, DeletionPlan, DeletionReason

logger = logging.getLogger(__name__)


def activity_name(pipeline: str, build: int) -> str:
    """Derive the store name of the activity for *pipeline* build *build*.

    >>> activity_name("Team/App_X", 42)
    'team-app-x-42'
    """
    name = f"{pipeline}-{build}"
    return name.replace("/", "-").replace("_", "-").lower()


def parse_build_number(record: ActivityRecord) -> int:
    """Convert a record's build field to an int.

    Raises:
        BuildNumberError: If the field is not a plain non-negative
            base-10 integer.
    """
    build = record.build
    if not (build.isascii() and build.isdigit()):
        raise BuildNumberError(record.name, build)
    return int(build)


def _normalize_dt(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _is_age_expired(record: ActivityRecord, max_age: timedelta, now: datetime) -> bool:
    if not record.is_pull_request or record.completed_at is None:
        return False
    return _normalize_dt(record.completed_at) + max_age < now


def _age_expired(
    records: Iterable[ActivityRecord], pr_hours: int, now: datetime
) -> list[Deletion]:
    max_age = timedelta(hours=pr_hours)
    return [
        Deletion(r.name, DeletionReason.AGE_EXPIRED, r.pipeline)
        for r in records
        if _is_age_expired(r, max_age, now)
    ]


def _orphaned(
    records: Iterable[ActivityRecord], known_jobs: Collection[str]
) -> list[Deletion]:
    known = set(known_jobs)
    return [
        Deletion(r.name, DeletionReason.ORPHANED, r.pipeline)
        for r in records
        if r.pipeline not in known
    ]


def _over_limit(
    records: Iterable[ActivityRecord], revision_limit: int
) -> list[Deletion]:
    # Convert every build before emitting anything: one bad value fails
    # the whole pass.
    builds_by_pipeline: dict[str, list[int]] = {}
    for record in records:
        builds_by_pipeline.setdefault(record.pipeline, []).append(
            parse_build_number(record)
        )

    deletions = []
    for pipeline, builds in builds_by_pipeline.items():
        builds.sort()
        excess = len(builds) - revision_limit
        if excess <= 0:
            continue
        logger.debug(
            "Pipeline %s has %d builds, keeping the newest %d",
            pipeline, len(builds), revision_limit,
        )
        for build in builds[:excess]:
            deletions.append(
                Deletion(activity_name(pipeline, build), DeletionReason.OVER_LIMIT, pipeline)
            )
    return deletions


def compute_deletions(
    records: Iterable[ActivityRecord],
    known_jobs: Collection[str] | None,
    pr_hours: int,
    revision_limit: int,
    now: datetime,
) -> DeletionPlan:
    """Decide which activities to delete.

    Args:
        records: Snapshot of all activities. May be empty.
        known_jobs: Names of the jobs that still exist. ``None`` skips the
            orphan pass entirely; an empty collection orphans everything.
        pr_hours: Hours a completed pull-request activity is kept for.
            An activity completed exactly ``pr_hours`` ago is kept.
        revision_limit: Number of most recent builds kept per pipeline.
        now: Current time. Naive values are taken as UTC.

    Returns:
        :class:`DeletionPlan` with one entry per target name.

    Raises:
        ConfigError: If a threshold is negative.
        BuildNumberError: If a surviving record's build is not a
            non-negative integer. No partial plan is returned.
    """
    if pr_hours < 0:
        raise ConfigError(f"pr_hours must be non-negative, got {pr_hours}")
    if revision_limit < 0:
        raise ConfigError(f"revision_limit must be non-negative, got {revision_limit}")

    snapshot = list(records)
    now = _normalize_dt(now)

    expired = _age_expired(snapshot, pr_hours, now)
    marked = {d.name for d in expired}

    orphans: list[Deletion] = []
    if known_jobs is not None:
        orphans = _orphaned((r for r in snapshot if r.name not in marked), known_jobs)
        marked.update(d.name for d in orphans)

    capped = _over_limit((r for r in snapshot if r.name not in marked), revision_limit)

    seen: set[str] = set()
    deletions: list[Deletion] = []
    for deletion in (*expired, *orphans, *capped):
        if deletion.name in seen:
            continue
        seen.add(deletion.name)
        deletions.append(deletion)

    logger.debug(
        "Retention plan: %d age-expired, %d orphaned, %d over-limit",
        len(expired), len(orphans), len(capped),
    )
    return DeletionPlan(tuple(deletions))
