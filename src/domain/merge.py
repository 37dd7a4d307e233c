"""Deduplicating merge of imported problems into an existing collection."""

from typing import Iterable

from loguru import logger

from domain.models import MergeResult, ProblemRecord


def merge_problems(
    existing: Iterable[ProblemRecord], candidates: Iterable[ProblemRecord]
) -> MergeResult:
    """
    Insert candidates whose slug is absent. Existing records are never
    overwritten, so re-running the same merge adds nothing.
    """
    by_slug: dict[str, ProblemRecord] = {}
    for record in existing:
        by_slug[record.title_slug] = record

    added_count = 0
    for candidate in candidates:
        if candidate.title_slug in by_slug:
            continue
        by_slug[candidate.title_slug] = candidate
        added_count += 1

    logger.debug(f"Merged {added_count} new problem(s), collection size {len(by_slug)}")
    return MergeResult(merged=list(by_slug.values()), added_count=added_count)
