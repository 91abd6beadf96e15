"""pipegc activities -- list stored pipeline activities."""

from __future__ import annotations

import click

from pipegc.cli.formatting import format_activities


@click.command()
@click.option("--pipeline", default=None, help="Only show activities of this pipeline.")
@click.pass_context
def activities(ctx: click.Context, pipeline: str | None) -> None:
    """List stored pipeline activities."""
    from pipegc.cli import _namespace_session

    with _namespace_session(ctx) as (ns, console):
        records = ns.list_activities()
        if pipeline is not None:
            records = [r for r in records if r.pipeline == pipeline]
        format_activities(records, console)
