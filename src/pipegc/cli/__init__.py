"""pipegc CLI -- terminal interface for activity garbage collection.

This module is NEVER imported from pipegc/__init__.py.
It is only loaded via the ``pipegc`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

import click
from rich.logging import RichHandler

from pipegc.cli.formatting import format_error, get_console

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rich.console import Console

    from pipegc.namespace import Namespace


def _configure_logging(verbose: bool) -> None:
    """Route pipegc's loggers through rich; INFO when verbose, else WARNING."""
    logger = logging.getLogger("pipegc")
    logger.setLevel(logging.INFO if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(show_path=False, console=get_console()))


@click.group()
@click.option(
    "--db",
    default=".pipegc.db",
    envvar="PIPEGC_DB",
    help="Path to the activity database.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log every decision.")
@click.version_option(package_name="pipegc", prog_name="pipegc")
@click.pass_context
def cli(ctx: click.Context, db: str, verbose: bool) -> None:
    """pipegc: housekeeping for CI pipeline activities."""
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = db
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


@contextmanager
def _namespace_session(ctx: click.Context) -> Iterator[tuple[Namespace, Console]]:
    """Context manager that opens a Namespace, yields (namespace, console), and handles cleanup.

    Ensures the namespace is closed on exit and formats exceptions as CLI errors.
    """
    import os

    from pipegc.namespace import Namespace

    console = get_console()
    db_path = ctx.obj["db_path"]
    if db_path != ":memory:" and not os.path.exists(db_path):
        format_error(f"Database not found: {db_path}", console)
        raise SystemExit(1)

    try:
        ns = Namespace.open(db_path)
        try:
            yield ns, console
        finally:
            ns.close()
    except SystemExit:
        raise
    except Exception as e:
        format_error(str(e), console)
        raise SystemExit(1) from None


# Register subcommands after cli group is defined
from pipegc.cli.commands.activities import activities  # noqa: E402
from pipegc.cli.commands.gc import gc  # noqa: E402
from pipegc.cli.commands.refs import refs  # noqa: E402

cli.add_command(activities)
cli.add_command(gc)
cli.add_command(refs)
