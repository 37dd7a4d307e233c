"""Transient models describing one import operation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from .problem import ProblemRecord


class ImportState(str, Enum):
    IDLE = "Idle"
    READING = "Reading"
    PARSING = "Parsing"
    MATCHING = "Matching"
    MERGING = "Merging"
    COMMITTING = "Committing"
    COMMITTED = "Committed"
    FAILED = "Failed"


_TRANSITIONS: dict[ImportState, frozenset[ImportState]] = {
    ImportState.IDLE: frozenset({ImportState.READING, ImportState.MERGING}),
    ImportState.READING: frozenset({ImportState.PARSING, ImportState.FAILED}),
    ImportState.PARSING: frozenset(
        {ImportState.MATCHING, ImportState.FAILED, ImportState.IDLE}
    ),
    ImportState.MATCHING: frozenset({ImportState.MERGING}),
    ImportState.MERGING: frozenset({ImportState.COMMITTING, ImportState.COMMITTED}),
    ImportState.COMMITTING: frozenset({ImportState.COMMITTED, ImportState.FAILED}),
    ImportState.COMMITTED: frozenset(),
    ImportState.FAILED: frozenset(),
}


class InvalidTransitionError(RuntimeError):
    """Import operation was driven through an illegal state change."""

    pass


@dataclass
class ImportOperation:
    """State tracker for a single import call."""

    user_id: str
    source: str
    state: ImportState = ImportState.IDLE

    def advance(self, new_state: ImportState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise InvalidTransitionError(
                f"Illegal import transition {self.state.value} -> {new_state.value}"
            )
        logger.info(f"Import [{self.user_id}:{self.source}] {self.state.value} -> {new_state.value}")
        self.state = new_state

    def fail(self) -> None:
        """Move to Failed from any state that allows it; no-op otherwise."""
        if ImportState.FAILED in _TRANSITIONS[self.state]:
            self.advance(ImportState.FAILED)


@dataclass
class ImportCandidate:
    """Record discovered by an import, annotated for selection before commit."""

    record: ProblemRecord
    is_new: bool
    selected: bool


@dataclass
class ImportBatch:
    """Problems discovered in one file, deduplicated by slug."""

    source: str
    candidates: list[ImportCandidate] = field(default_factory=list)

    @classmethod
    def build(
        cls, source: str, records: list[ProblemRecord], existing_slugs: set[str]
    ) -> ImportBatch:
        seen: set[str] = set()
        candidates = []
        for record in records:
            if record.title_slug in seen:
                continue
            seen.add(record.title_slug)
            is_new = record.title_slug not in existing_slugs
            candidates.append(ImportCandidate(record=record, is_new=is_new, selected=is_new))
        return cls(source=source, candidates=candidates)

    @property
    def total_found(self) -> int:
        return len(self.candidates)

    @property
    def new_count(self) -> int:
        return sum(1 for c in self.candidates if c.is_new)

    @property
    def existing_count(self) -> int:
        return self.total_found - self.new_count

    def selected_records(self) -> list[ProblemRecord]:
        return [c.record for c in self.candidates if c.selected]


@dataclass
class MergeResult:
    merged: list[ProblemRecord]
    added_count: int


@dataclass
class ImportResult:
    """Outcome of an import once merged (and, unless failed, committed)."""

    user_id: str
    source: str
    added_count: int
    total_found: int
    merged: list[ProblemRecord]
    state: ImportState


@dataclass
class PendingCommit:
    """Candidates of a commit that failed to persist, kept for a retry."""

    source: str
    records: list[ProblemRecord]
