"""Ref-set parsing.

A ref-set is a comma-separated list of ``key:value`` pairs. The first
pair is ``base_branch:base_sha``; every following pair is
``change_id:sha``. Pairs are split on their first ``:`` only.
"""

from __future__ import annotations

import os
from typing import Mapping

from pipegc.exceptions import RefSetParseError
from pipegc.models.refs import RefSet

PULL_REFS_ENV = "PULL_REFS"

_PAIR_SEPARATOR = ","
_KEY_SEPARATOR = ":"


def _split_pair(value: str, pair: str) -> tuple[str, str]:
    key, sep, sha = pair.partition(_KEY_SEPARATOR)
    if not sep:
        raise RefSetParseError(value, f"pair {pair!r} has no ':' separator")
    if not key:
        raise RefSetParseError(value, f"pair {pair!r} has an empty key")
    if not sha:
        raise RefSetParseError(value, f"pair {pair!r} has an empty value")
    return key, sha


def parse_ref_set(value: str) -> RefSet:
    """Decode a ref-set string.

    Args:
        value: Encoded ref-set, e.g. ``"master:aaa,12:bbb,34:ccc"``.

    Returns:
        The decoded :class:`RefSet`.

    Raises:
        RefSetParseError: If *value* is empty, a pair lacks ``:``, a key or
            value is empty, or a change identifier appears twice.
    """
    if not value:
        raise RefSetParseError(value, "empty ref-set")

    pairs = value.split(_PAIR_SEPARATOR)
    base_branch, base_sha = _split_pair(value, pairs[0])

    to_merge: dict[str, str] = {}
    for pair in pairs[1:]:
        change_id, sha = _split_pair(value, pair)
        if change_id in to_merge:
            raise RefSetParseError(value, f"duplicate change {change_id!r}")
        to_merge[change_id] = sha

    return RefSet(base_branch=base_branch, base_sha=base_sha, to_merge=to_merge)


def format_ref_set(ref_set: RefSet) -> str:
    """Encode *ref_set* back into its compact string form."""
    return ref_set.encode()


def ref_set_from_env(
    environ: Mapping[str, str] | None = None,
    *,
    key: str = PULL_REFS_ENV,
) -> RefSet | None:
    """Read and decode the ref-set a CI run was started with.

    Returns None when the variable is unset or blank.

    Raises:
        RefSetParseError: If the variable is set but malformed.
    """
    env = os.environ if environ is None else environ
    raw = env.get(key, "").strip()
    if not raw:
        return None
    return parse_ref_set(raw)
