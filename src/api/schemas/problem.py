"""Pydantic schemas for problem API endpoints."""

from pydantic import BaseModel

from domain.models import Difficulty, ProblemRecord, Status


class ProblemSchema(BaseModel):
    """A tracked problem."""

    title: str
    title_slug: str
    difficulty: Difficulty = Difficulty.UNKNOWN
    type: str | None = None
    status: Status = Status.TODO
    url: str | None = None
    source_sheets: list[str] = []
    completed_date: str | None = None
    added_at: str | None = None

    class Config:
        from_attributes = True

    @classmethod
    def from_record(cls, record: ProblemRecord) -> "ProblemSchema":
        return cls(
            title=record.title,
            title_slug=record.title_slug,
            difficulty=record.difficulty,
            type=record.type,
            status=record.status,
            url=record.url,
            source_sheets=sorted(record.source_sheets),
            completed_date=record.completed_date,
            added_at=record.added_at,
        )

    def to_record(self) -> ProblemRecord:
        return ProblemRecord(
            title=self.title,
            title_slug=self.title_slug,
            difficulty=self.difficulty,
            type=self.type,
            status=self.status,
            url=self.url,
            source_sheets=set(self.source_sheets),
            completed_date=self.completed_date,
            added_at=self.added_at,
        )


class StatusUpdateRequest(BaseModel):
    """Request to change a problem's status."""

    status: Status
