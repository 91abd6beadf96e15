"""pipegc gc -- garbage collection commands."""

from __future__ import annotations

import click

from pipegc.cli.formatting import format_gc_result
from pipegc.models.config import (
    DEFAULT_PULL_REQUEST_HOURS,
    DEFAULT_REVISION_HISTORY_LIMIT,
    RetentionConfig,
)


@click.group()
def gc() -> None:
    """Garbage collect stored CI resources."""


@gc.command("activities")
@click.option(
    "-l",
    "--revision-history-limit",
    default=DEFAULT_REVISION_HISTORY_LIMIT,
    show_default=True,
    type=click.IntRange(min=0),
    help="Minimum number of activities per pipeline to keep.",
)
@click.option(
    "-p",
    "--pull-request-hours",
    default=DEFAULT_PULL_REQUEST_HOURS,
    show_default=True,
    type=click.IntRange(min=0),
    help="Number of hours to keep pull request activities for.",
)
@click.option("--dry-run", is_flag=True, help="Show what would be deleted without deleting.")
@click.option(
    "--ignore-not-found",
    is_flag=True,
    help="Treat activities that vanished before deletion as deleted.",
)
@click.option(
    "--prow/--no-prow",
    "event_driven",
    default=None,
    help="Override whether the event-driven front end is active (skips the orphan check).",
)
@click.pass_context
def gc_activities(
    ctx: click.Context,
    revision_history_limit: int,
    pull_request_hours: int,
    dry_run: bool,
    ignore_not_found: bool,
    event_driven: bool | None,
) -> None:
    """Garbage collect pipeline activities.

    Deletes completed pull request activities older than the retention
    window, activities whose job no longer exists, and all but the most
    recent builds of every pipeline.

    Deletions are committed together at the end of the run. If any
    deletion fails (including an activity that is already gone, unless
    --ignore-not-found is given) the earlier deletions are undone too.

    \b
    Examples:
      pipegc gc activities
      pipegc gc activities -l 10 -p 24 --dry-run
    """
    from pipegc.cli import _namespace_session

    config = RetentionConfig(
        revision_history_limit=revision_history_limit,
        pull_request_hours=pull_request_hours,
        ignore_not_found=ignore_not_found,
    )

    with _namespace_session(ctx) as (ns, console):
        result = ns.gc_activities(
            config=config, dry_run=dry_run, event_driven=event_driven,
        )
        format_gc_result(result, console)
