"""Pydantic schemas for import API endpoints."""

from pydantic import BaseModel

from domain.models import ImportBatch, ImportResult

from .problem import ProblemSchema


class ImportResultResponse(BaseModel):
    """Outcome of an import."""

    source: str
    added_count: int
    total_found: int
    total_problems: int
    state: str
    message: str

    @classmethod
    def from_result(cls, result: ImportResult) -> "ImportResultResponse":
        return cls(
            source=result.source,
            added_count=result.added_count,
            total_found=result.total_found,
            total_problems=len(result.merged),
            state=result.state.value,
            message=f"Successfully imported {result.added_count} new problems!",
        )


class PreviewItem(BaseModel):
    """One discovered problem in an import preview."""

    problem: ProblemSchema
    is_new: bool
    selected: bool


class ImportPreviewResponse(BaseModel):
    """Problems found in an uploaded file, before commit."""

    file_name: str
    total_found: int
    new_count: int
    existing_count: int
    problems: list[PreviewItem]

    @classmethod
    def from_batch(cls, batch: ImportBatch) -> "ImportPreviewResponse":
        return cls(
            file_name=batch.source,
            total_found=batch.total_found,
            new_count=batch.new_count,
            existing_count=batch.existing_count,
            problems=[
                PreviewItem(
                    problem=ProblemSchema.from_record(c.record),
                    is_new=c.is_new,
                    selected=c.selected,
                )
                for c in batch.candidates
            ],
        )


class CommitRequest(BaseModel):
    """Selected preview items to merge."""

    problems: list[ProblemSchema]
    source: str = "selection"


class LinkImportRequest(BaseModel):
    """List, study plan or tag URL to import."""

    url: str


class MetadataSyncResponse(BaseModel):
    updated_count: int
