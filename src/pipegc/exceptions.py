"""pipegc exception hierarchy.

All pipegc-specific exceptions inherit from PipeGCError.
"""


class PipeGCError(Exception):
    """Base exception for all pipegc errors."""


class RefSetParseError(PipeGCError):
    """Raised when a ref-set string is malformed."""

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid ref-set {value!r}: {reason}")


class BuildNumberError(PipeGCError):
    """Raised when an activity's build field is not a non-negative integer.

    Aborts the whole retention pass: a corrupt build number is surfaced
    instead of being skipped.
    """

    def __init__(self, activity_name: str, build: str) -> None:
        self.activity_name = activity_name
        self.build = build
        super().__init__(
            f"Activity {activity_name!r} has a non-numeric build number: {build!r}"
        )


class CollaboratorError(PipeGCError):
    """Raised when an activity store or job registry call fails."""


class ActivityNotFoundError(CollaboratorError):
    """Raised when deleting an activity that does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Activity not found: {name}")


class ConfigError(PipeGCError):
    """Raised when retention configuration is invalid."""
