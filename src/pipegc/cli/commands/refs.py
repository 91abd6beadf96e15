"""pipegc refs -- decode a ref-set."""

from __future__ import annotations

import click

from pipegc.cli.formatting import format_error, format_ref_set, get_console
from pipegc.operations.refs import PULL_REFS_ENV


@click.command()
@click.argument("value", required=False)
def refs(value: str | None) -> None:
    """Decode a ref-set such as ``master:abc,12:def``.

    VALUE defaults to the PULL_REFS environment variable.
    """
    from pipegc.exceptions import RefSetParseError
    from pipegc.operations.refs import parse_ref_set, ref_set_from_env

    console = get_console()
    try:
        ref_set = parse_ref_set(value) if value is not None else ref_set_from_env()
    except RefSetParseError as e:
        format_error(str(e), console)
        raise SystemExit(1) from None

    if ref_set is None:
        format_error(f"No ref-set given and {PULL_REFS_ENV} is not set.", console)
        raise SystemExit(1)
    format_ref_set(ref_set, console)
