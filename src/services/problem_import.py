"""Service orchestrating file imports into a user's problem collection."""

import asyncio
from pathlib import Path
from typing import BinaryIO, Union

from loguru import logger

from domain.exceptions import (
    FileReadError,
    MetadataLoadError,
    NoMatchesFoundError,
    PersistenceError,
    ProblemImportError,
    StaleResultError,
    UnsupportedFormatError,
)
from domain.matching import MetadataMatcher
from domain.merge import merge_problems
from domain.models import (
    ImportBatch,
    ImportOperation,
    ImportResult,
    ImportState,
    PendingCommit,
    ProblemRecord,
)
from domain.models.problem import utc_now_iso
from domain.parsers import URLParser, parse_grid, slug_to_title
from infrastructure.concurrency import ImportGate, RequestGeneration
from infrastructure.metadata_catalog import MetadataCatalog
from infrastructure.parsers import FileKind, extract_text, file_extension, read_grid, sniff_format

from .collection import ProblemCollection

FileSource = Union[bytes, BinaryIO, Path]


def read_source(source: FileSource) -> bytes:
    """Raw bytes of an upload, a file object or a path."""
    try:
        if isinstance(source, (bytes, bytearray)):
            return bytes(source)
        if isinstance(source, Path):
            return source.read_bytes()
        return source.read()
    except (OSError, ValueError) as e:
        raise FileReadError(f"Failed to read file: {e}") from e


class ProblemImportService:
    """Import pipeline: sniff, read, parse, match, merge, commit."""

    def __init__(
        self,
        *,
        collection: ProblemCollection,
        catalog: MetadataCatalog,
        matcher: MetadataMatcher | None = None,
        host: str | None = None,
        gate: ImportGate | None = None,
    ):
        """Initialize service with dependencies."""
        self.collection = collection
        self.catalog = catalog
        self.matcher = matcher or MetadataMatcher(catalog)
        self.host = host
        self.gate = gate or ImportGate()
        self._previews = RequestGeneration()
        self._pending: dict[str, PendingCommit] = {}

    def is_importing(self, user_id: str) -> bool:
        return self.gate.is_active(user_id)

    def pending_commit(self, user_id: str) -> PendingCommit | None:
        return self._pending.get(user_id)

    async def import_file(self, user_id: str, file_name: str, source: FileSource) -> ImportResult:
        """Import every problem found in a file and commit the merge."""
        with self.gate.hold(user_id):
            operation = ImportOperation(user_id=user_id, source=file_name)
            records = await self._discover(operation, file_name, source)
            return await self._merge_and_commit(operation, records)

    async def preview_file(self, user_id: str, file_name: str, source: FileSource) -> ImportBatch:
        """
        Discover problems without committing. Items are flagged new/existing
        and new ones are pre-selected.
        """
        token = self._previews.begin(user_id)
        operation = ImportOperation(user_id=user_id, source=file_name)

        records = await self._discover(operation, file_name, source)
        existing = await self.collection.load(user_id)

        if not self._previews.is_current(user_id, token):
            logger.info(f"Discarding superseded preview of {file_name} for {user_id}")
            raise StaleResultError(f"Preview of {file_name} was superseded by a newer request")

        batch = ImportBatch.build(file_name, records, {r.title_slug for r in existing})
        logger.info(
            f"Preview of {file_name}: {batch.total_found} found, {batch.new_count} new, "
            f"{batch.existing_count} existing"
        )
        return batch

    async def commit_selection(
        self, user_id: str, records: list[ProblemRecord], source: str = "selection"
    ) -> ImportResult:
        """Merge a chosen subset of previewed problems and commit."""
        if not records:
            raise NoMatchesFoundError(source)

        with self.gate.hold(user_id):
            operation = ImportOperation(user_id=user_id, source=source)
            for record in records:
                record.added_at = record.added_at or utc_now_iso()
            return await self._merge_and_commit(operation, records)

    async def retry_commit(self, user_id: str) -> ImportResult:
        """
        Merge the candidates of the last failed commit into the current
        collection and write again. Edits saved since the failure are kept.
        """
        pending = self._pending.get(user_id)
        if pending is None:
            raise PersistenceError(f"No failed commit to retry for user {user_id}")

        with self.gate.hold(user_id):
            operation = ImportOperation(user_id=user_id, source=pending.source)
            result = await self._merge_and_commit(operation, pending.records)

        logger.info(f"Retried commit for {user_id}: {result.added_count} problem(s) added")
        return result

    async def _discover(
        self, operation: ImportOperation, file_name: str, source: FileSource
    ) -> list[ProblemRecord]:
        kind = sniff_format(file_name)
        if kind == FileKind.UNSUPPORTED:
            raise UnsupportedFormatError(file_name)
        extension = file_extension(file_name)

        operation.advance(ImportState.READING)
        try:
            data = await asyncio.to_thread(read_source, source)
        except FileReadError:
            operation.fail()
            raise

        operation.advance(ImportState.PARSING)
        try:
            if kind == FileKind.DOCUMENT:
                records = await asyncio.to_thread(self._parse_document, data, extension, file_name)
            else:
                grid = await asyncio.to_thread(read_grid, data, extension)
                records = parse_grid(grid, source=file_name, host=self.host)
        except ProblemImportError as e:
            logger.error(f"Import of {file_name} failed while parsing: {e}")
            operation.fail()
            raise

        if not records:
            operation.advance(ImportState.IDLE)
            raise NoMatchesFoundError(file_name)

        operation.advance(ImportState.MATCHING)
        await self._ensure_catalog()
        matched = sum(1 for record in records if self.matcher.enrich(record))
        logger.info(f"Matched {matched}/{len(records)} problem(s) against the catalog")
        return records

    def _parse_document(self, data: bytes, extension: str, file_name: str) -> list[ProblemRecord]:
        text = extract_text(data, extension)
        added_at = utc_now_iso()
        return [
            ProblemRecord(
                title=slug_to_title(slug),
                title_slug=slug,
                url=URLParser.build_problem_url(slug, self.host),
                source_sheets={file_name},
                added_at=added_at,
            )
            for slug in URLParser.extract_slugs(text, self.host)
        ]

    async def _ensure_catalog(self) -> None:
        try:
            await self.catalog.load()
        except MetadataLoadError as e:
            logger.warning(f"Continuing without metadata: {e}")

    async def _merge_and_commit(
        self, operation: ImportOperation, records: list[ProblemRecord]
    ) -> ImportResult:
        operation.advance(ImportState.MERGING)
        for record in records:
            record.added_at = record.added_at or utc_now_iso()

        existing = await self.collection.load(operation.user_id)
        merge = merge_problems(existing, records)
        result = ImportResult(
            user_id=operation.user_id,
            source=operation.source,
            added_count=merge.added_count,
            total_found=len({r.title_slug for r in records}),
            merged=merge.merged,
            state=operation.state,
        )

        if merge.added_count == 0:
            logger.info(f"Nothing new in {operation.source}; no write needed")
            operation.advance(ImportState.COMMITTED)
            result.state = operation.state
            self._pending.pop(operation.user_id, None)
            return result

        operation.advance(ImportState.COMMITTING)
        try:
            await self.collection.save(operation.user_id, merge.merged)
        except PersistenceError as e:
            operation.fail()
            result.state = operation.state
            self._pending[operation.user_id] = PendingCommit(operation.source, list(records))
            e.result = result
            raise

        operation.advance(ImportState.COMMITTED)
        result.state = operation.state
        self._pending.pop(operation.user_id, None)
        logger.info(f"Imported {merge.added_count} new problem(s) from {operation.source}")
        return result
