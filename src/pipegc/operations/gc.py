"""Garbage collection of pipeline activities.

Fetches a snapshot from the collaborators, asks the retention engine for
a plan, then executes the plan one deletion at a time. The first failed
deletion aborts the rest of the run.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from pipegc.exceptions import ActivityNotFoundError, CollaboratorError, PipeGCError
from pipegc.models.config import RetentionConfig
from pipegc.models.retention import DeletionPlan, GCResult
from pipegc.operations.retention import compute_deletions

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pipegc.protocols import ActivityStore, JobRegistry, ModeDetector

logger = logging.getLogger(__name__)


@contextmanager
def _collaborator_call(action: str) -> Iterator[None]:
    """Re-raise foreign exceptions from a collaborator as CollaboratorError."""
    try:
        yield
    except PipeGCError:
        raise
    except Exception as exc:
        raise CollaboratorError(f"Failed to {action}: {exc}") from exc


def gc_activities(
    store: ActivityStore,
    registry: JobRegistry,
    mode: ModeDetector,
    *,
    config: RetentionConfig | None = None,
    now: datetime | None = None,
    dry_run: bool = False,
) -> GCResult:
    """Garbage-collect activities from *store*.

    Args:
        store: Activity store to read the snapshot from and delete from.
        registry: Job registry, consulted only when the event-driven
            front end is not active.
        mode: Mode detector deciding whether orphan detection applies.
        config: Thresholds and not-found policy. Defaults created if None.
        now: Current time, for determinism. Defaults to ``datetime.now(UTC)``.
        dry_run: Compute the plan but delete nothing.

    Returns:
        :class:`GCResult` with the plan and what was deleted.

    Raises:
        CollaboratorError: If listing or deleting fails. With
            ``config.ignore_not_found`` set, deletes of activities that
            no longer exist are skipped instead.
        BuildNumberError: If an activity's build is not numeric. Nothing
            is deleted in that case.
    """
    if config is None:
        config = RetentionConfig()
    if now is None:
        now = datetime.now(timezone.utc)

    start = time.monotonic()

    with _collaborator_call("list activities"):
        activities = store.list_activities()
    if not activities:
        logger.info("no activities found")
        return GCResult(dry_run=dry_run, duration_seconds=time.monotonic() - start)

    with _collaborator_call("detect front end mode"):
        event_driven = mode.is_event_driven()

    known_jobs: list[str] | None = None
    if not event_driven:
        with _collaborator_call("list known jobs"):
            known_jobs = registry.list_known_job_names()
        logger.debug("Found %d known jobs", len(known_jobs))

    plan = compute_deletions(
        activities,
        known_jobs,
        config.pull_request_hours,
        config.revision_history_limit,
        now,
    )

    deleted, skipped = _execute_plan(
        store, plan, dry_run=dry_run, ignore_not_found=config.ignore_not_found
    )

    return GCResult(
        plan=plan,
        deleted=tuple(deleted),
        skipped_not_found=tuple(skipped),
        activities_scanned=len(activities),
        event_driven=event_driven,
        dry_run=dry_run,
        duration_seconds=time.monotonic() - start,
    )


def _execute_plan(
    store: ActivityStore,
    plan: DeletionPlan,
    *,
    dry_run: bool,
    ignore_not_found: bool,
) -> tuple[list[str], list[str]]:
    deleted: list[str] = []
    skipped: list[str] = []
    for deletion in plan:
        if dry_run:
            logger.info("would delete activity %s (%s)", deletion.name, deletion.reason)
            continue
        try:
            with _collaborator_call(f"delete activity {deletion.name}"):
                store.delete_activity(deletion.name)
        except ActivityNotFoundError:
            if not ignore_not_found:
                raise
            logger.info("activity %s already deleted", deletion.name)
            skipped.append(deletion.name)
            continue
        logger.info("deleted activity %s (%s)", deletion.name, deletion.reason)
        deleted.append(deletion.name)
    return deleted, skipped


class FixedMode:
    """Mode detector with a predetermined answer.

    Used when the caller already knows which front end is active, e.g.
    from a command-line override.
    """

    def __init__(self, event_driven: bool) -> None:
        self._event_driven = event_driven

    def is_event_driven(self) -> bool:
        return self._event_driven

    def __repr__(self) -> str:
        return f"FixedMode(event_driven={self._event_driven})"
