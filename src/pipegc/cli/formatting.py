"""Rich formatting helpers for the pipegc CLI.

Provides functions that format SDK data structures for terminal display.
Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pipegc.models.retention import DeletionReason

if TYPE_CHECKING:
    from pipegc.models.activity import ActivityRecord
    from pipegc.models.refs import RefSet
    from pipegc.models.retention import GCResult

_REASON_STYLES = {
    DeletionReason.AGE_EXPIRED: "yellow",
    DeletionReason.ORPHANED: "magenta",
    DeletionReason.OVER_LIMIT: "cyan",
}


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_activities(records: list[ActivityRecord], console: Console) -> None:
    """Display stored activities in a compact table."""
    if not records:
        console.print("[dim]No activities.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Name", style="yellow", no_wrap=True)
    table.add_column("Pipeline", no_wrap=True)
    table.add_column("Build", justify="right", style="green")
    table.add_column("Completed", style="dim")

    for record in records:
        completed = (
            record.completed_at.strftime("%Y-%m-%d %H:%M")
            if record.completed_at is not None
            else "running"
        )
        table.add_row(
            escape(record.name),
            escape(record.pipeline),
            escape(record.build),
            completed,
        )

    console.print(table)


def format_gc_result(result: GCResult, console: Console) -> None:
    """Display the outcome of an activity garbage collection run."""
    if result.event_driven:
        console.print("[dim]Event-driven front end active: orphan check skipped.[/dim]")

    plan = result.plan
    if not plan:
        console.print("[dim]No activities to delete.[/dim]")
        return

    verb = "Would delete" if result.dry_run else "Deleted"
    for deletion in plan:
        if not result.dry_run and deletion.name in result.skipped_not_found:
            console.print(f"  [dim]already gone[/dim]  {escape(deletion.name)}")
            continue
        style = _REASON_STYLES[deletion.reason]
        console.print(
            f"  [{style}]{deletion.reason.value:<11}[/{style}] {escape(deletion.name)}",
            highlight=False,
        )

    counts = plan.counts()
    summary = ", ".join(f"{n} {reason.value}" for reason, n in counts.items() if n)
    total = len(plan) if result.dry_run else result.activities_removed
    console.print(f"{verb} [bold]{total}[/bold] activities ({summary})", highlight=False)


def format_ref_set(ref_set: RefSet, console: Console) -> None:
    """Display a decoded ref-set."""
    console.print(
        f"Base:  [green]{escape(ref_set.base_branch)}[/green] "
        f"[yellow]{escape(ref_set.base_sha)}[/yellow]",
        highlight=False,
    )
    if not ref_set.to_merge:
        console.print("[dim]No changes to merge.[/dim]")
        return
    console.print("Merge:")
    for change_id, sha in ref_set.to_merge.items():
        console.print(
            f"  [cyan]{escape(change_id)}[/cyan]  [yellow]{escape(sha)}[/yellow]",
            highlight=False,
        )


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
