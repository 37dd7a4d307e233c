"""Domain models package."""

from .importing import (
    ImportBatch,
    ImportCandidate,
    ImportOperation,
    ImportResult,
    ImportState,
    InvalidTransitionError,
    MergeResult,
    PendingCommit,
)
from .metadata import VALID_DIFFICULTIES, MetadataEntry
from .problem import Difficulty, ProblemRecord, Status

__all__ = [
    "Difficulty",
    "ImportBatch",
    "ImportCandidate",
    "ImportOperation",
    "ImportResult",
    "ImportState",
    "InvalidTransitionError",
    "MergeResult",
    "MetadataEntry",
    "PendingCommit",
    "ProblemRecord",
    "Status",
    "VALID_DIFFICULTIES",
]
