"""Ref-set domain model.

A ref-set names the base commit of a CI run plus the pending change
commits merged on top of it, e.g. ``master:aaa,12:bbb,34:ccc``.
"""

from __future__ import annotations

import types
from dataclasses import dataclass, field
from typing import Mapping


@dataclass(frozen=True)
class RefSet:
    """Decoded ref-set.

    Fields:
        base_branch: Branch the run targets.
        base_sha: Commit the base branch was at.
        to_merge: Change identifier (usually a pull-request number) to
            commit sha. Order is not significant. Stored read-only.
    """

    base_branch: str
    base_sha: str
    to_merge: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "to_merge", types.MappingProxyType(dict(self.to_merge)))

    def __hash__(self) -> int:
        return hash((self.base_branch, self.base_sha, frozenset(self.to_merge.items())))

    @property
    def is_batch(self) -> bool:
        """True when more than one change is merged into the base."""
        return len(self.to_merge) > 1

    def encode(self) -> str:
        """Return the compact ``base:sha,change:sha,...`` encoding."""
        pairs = [f"{self.base_branch}:{self.base_sha}"]
        pairs.extend(f"{k}:{v}" for k, v in self.to_merge.items())
        return ",".join(pairs)

    def __str__(self) -> str:
        return self.encode()
