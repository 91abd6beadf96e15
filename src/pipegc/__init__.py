"""pipegc: retention policy and ref-set parsing for CI pipeline activities.

Decides which historical pipeline activities to garbage-collect, and
decodes the compact ref-sets CI runs are started with.
"""

from pipegc._version import __version__

# Store entry point
from pipegc.namespace import Namespace

# Models
from pipegc.models.activity import ActivityRecord
from pipegc.models.config import RetentionConfig
from pipegc.models.refs import RefSet
from pipegc.models.retention import Deletion, DeletionPlan, DeletionReason, GCResult

# Operations
from pipegc.operations.gc import FixedMode, gc_activities
from pipegc.operations.refs import format_ref_set, parse_ref_set, ref_set_from_env
from pipegc.operations.retention import activity_name, compute_deletions, parse_build_number

# Protocols
from pipegc.protocols import ActivityStore, JobRegistry, ModeDetector

# Exceptions
from pipegc.exceptions import (
    ActivityNotFoundError,
    BuildNumberError,
    CollaboratorError,
    ConfigError,
    PipeGCError,
    RefSetParseError,
)

__all__ = [
    "__version__",
    "Namespace",
    # Models
    "ActivityRecord",
    "RetentionConfig",
    "RefSet",
    "Deletion",
    "DeletionPlan",
    "DeletionReason",
    "GCResult",
    # Operations
    "FixedMode",
    "gc_activities",
    "format_ref_set",
    "parse_ref_set",
    "ref_set_from_env",
    "activity_name",
    "compute_deletions",
    "parse_build_number",
    # Protocols
    "ActivityStore",
    "JobRegistry",
    "ModeDetector",
    # Exceptions
    "PipeGCError",
    "RefSetParseError",
    "BuildNumberError",
    "CollaboratorError",
    "ActivityNotFoundError",
    "ConfigError",
]
