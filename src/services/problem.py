"""Service for reading and updating tracked problems."""

from loguru import logger

from domain.models import ProblemRecord, Status

from .collection import ProblemCollection


class ProblemNotFoundError(LookupError):
    """No problem with the given slug in the user's collection."""

    pass


class ProblemService:
    """Service for managing a user's tracked problems."""

    def __init__(self, collection: ProblemCollection):
        self.collection = collection

    async def get_problems(self, user_id: str) -> list[ProblemRecord]:
        return await self.collection.load(user_id)

    async def update_status(self, user_id: str, slug: str, status: Status) -> ProblemRecord:
        """Change one problem's status; Done stamps ``completed_date``."""
        logger.debug(f"Updating status of {slug} for {user_id} to {status.value}")

        records = await self.collection.load(user_id)
        record = next((r for r in records if r.title_slug == slug), None)
        if record is None:
            raise ProblemNotFoundError(f"Problem {slug} not found")

        record.set_status(status)
        await self.collection.save(user_id, records)
        return record
