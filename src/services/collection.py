"""Loading and saving a user's problem collection in the document store."""

from loguru import logger

from domain.exceptions import PersistenceError
from domain.models import ProblemRecord
from infrastructure.parsers.interfaces import DocumentStoreProtocol


class ProblemCollection:
    """Maps the ``problems`` array of a user document to ProblemRecords."""

    FIELD = "problems"

    def __init__(self, store: DocumentStoreProtocol):
        self.store = store

    async def load(self, user_id: str) -> list[ProblemRecord]:
        document = await self.store.get(user_id) or {}
        return [
            ProblemRecord.from_dict(item)
            for item in document.get(self.FIELD) or []
            if item.get("titleSlug")
        ]

    async def save(self, user_id: str, records: list[ProblemRecord]) -> None:
        """Write the whole collection as one update, or raise PersistenceError."""
        try:
            await self.store.update(user_id, {self.FIELD: [r.to_dict() for r in records]})
        except Exception as e:
            logger.error(f"Failed to save problems for {user_id}: {e}")
            raise PersistenceError(f"Failed to save problems: {e}") from e

        logger.info(f"Saved {len(records)} problem(s) for {user_id}")
