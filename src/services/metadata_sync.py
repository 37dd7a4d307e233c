"""Backfill difficulty/topic for problems stored as Unknown."""

from loguru import logger

from domain.exceptions import LinkImportError, MetadataLoadError
from domain.matching import MetadataMatcher
from domain.models import Difficulty, ProblemRecord
from infrastructure.concurrency import ImportGate, batch_requests
from infrastructure.leetcode_client import LeetCodeClient, Question
from infrastructure.metadata_catalog import MetadataCatalog

from .collection import ProblemCollection


class MetadataSyncService:
    """Re-match Unknown records against the catalog, then the question API."""

    def __init__(
        self,
        *,
        collection: ProblemCollection,
        catalog: MetadataCatalog,
        client: LeetCodeClient | None = None,
        matcher: MetadataMatcher | None = None,
        batch_size: int = 5,
        batch_delay: float = 1.0,
        gate: ImportGate | None = None,
    ):
        self.collection = collection
        self.catalog = catalog
        self.client = client
        self.matcher = matcher or MetadataMatcher(catalog)
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.gate = gate or ImportGate()

    async def sync(self, user_id: str) -> int:
        """Returns the number of records whose difficulty was resolved."""
        with self.gate.hold(user_id):
            return await self._sync(user_id)

    async def _sync(self, user_id: str) -> int:
        records = await self.collection.load(user_id)
        unknown = [r for r in records if r.difficulty == Difficulty.UNKNOWN]
        if not unknown:
            return 0

        try:
            await self.catalog.load()
        except MetadataLoadError as e:
            logger.warning(f"Catalog unavailable during sync: {e}")

        updated = 0
        remaining = []
        for record in unknown:
            self.matcher.enrich(record)
            if record.difficulty != Difficulty.UNKNOWN:
                updated += 1
            else:
                remaining.append(record)

        if remaining and self.client is not None:
            updated += await self._lookup_remaining(remaining)

        if updated:
            await self.collection.save(user_id, records)
        logger.info(f"Metadata sync for {user_id}: {updated}/{len(unknown)} resolved")
        return updated

    async def _lookup_remaining(self, records: list[ProblemRecord]) -> int:
        results = await batch_requests(
            records,
            self.batch_size,
            lambda record: self.client.fetch_question(record.title_slug),
            delay=self.batch_delay,
        )

        updated = 0
        for record, result in zip(records, results):
            if isinstance(result, LinkImportError):
                logger.warning(f"Lookup failed for {record.title_slug}: {result}")
                continue
            if isinstance(result, BaseException):
                raise result
            if self._apply_question(record, result):
                updated += 1
        return updated

    @staticmethod
    def _apply_question(record: ProblemRecord, question: Question | None) -> bool:
        if not question:
            return False
        difficulty = Difficulty.parse(question.get("difficulty"))
        if difficulty == Difficulty.UNKNOWN:
            return False
        record.difficulty = difficulty
        tags = [t.get("name") for t in question.get("topicTags") or [] if t.get("name")]
        if tags and record.type in (None, "", "Uncategorized"):
            record.type = ", ".join(tags)
        return True
