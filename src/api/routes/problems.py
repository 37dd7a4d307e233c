"""API routes for tracked problems and imports."""

from typing import Annotated

from litestar import Controller, get, patch, post
from litestar.datastructures import UploadFile
from litestar.enums import RequestEncodingType
from litestar.params import Body
from litestar.status_codes import HTTP_200_OK
from loguru import logger

from api.schemas.imports import (
    CommitRequest,
    ImportPreviewResponse,
    ImportResultResponse,
    LinkImportRequest,
    MetadataSyncResponse,
)
from api.schemas.problem import ProblemSchema, StatusUpdateRequest
from domain.exceptions import FileReadError
from services import (
    LinkImportService,
    MetadataSyncService,
    ProblemImportService,
    ProblemService,
)

MultipartFile = Annotated[UploadFile, Body(media_type=RequestEncodingType.MULTI_PART)]


async def _read_upload(upload: UploadFile) -> bytes:
    try:
        return await upload.read()
    except OSError as e:
        raise FileReadError(f"Failed to read {upload.filename}: {e}") from e


class ProblemController(Controller):
    """Controller for a user's problems and problem imports."""

    path = "/users/{user_id:str}/problems"

    @get("/", status_code=HTTP_200_OK)
    async def list_problems(
        self, user_id: str, problem_service: ProblemService
    ) -> list[ProblemSchema]:
        problems = await problem_service.get_problems(user_id)
        return [ProblemSchema.from_record(p) for p in problems]

    @patch("/{slug:str}/status", status_code=HTTP_200_OK)
    async def update_status(
        self,
        user_id: str,
        slug: str,
        data: StatusUpdateRequest,
        problem_service: ProblemService,
    ) -> ProblemSchema:
        record = await problem_service.update_status(user_id, slug, data.status)
        return ProblemSchema.from_record(record)

    @post("/import", status_code=HTTP_200_OK)
    async def import_file(
        self,
        user_id: str,
        data: MultipartFile,
        import_service: ProblemImportService,
    ) -> ImportResultResponse:
        """
        Import every problem found in an uploaded file.

        Accepts txt, md, markdown, docx, pdf, xlsx, xls and csv files.
        """
        logger.debug(f"API request to import {data.filename} for {user_id}")

        content = await _read_upload(data)
        result = await import_service.import_file(user_id, data.filename, content)
        return ImportResultResponse.from_result(result)

    @post("/import/preview", status_code=HTTP_200_OK)
    async def preview_file(
        self,
        user_id: str,
        data: MultipartFile,
        import_service: ProblemImportService,
    ) -> ImportPreviewResponse:
        """List problems found in a file, flagging which are new, without saving."""
        logger.debug(f"API request to preview {data.filename} for {user_id}")

        content = await _read_upload(data)
        batch = await import_service.preview_file(user_id, data.filename, content)
        return ImportPreviewResponse.from_batch(batch)

    @post("/import/commit", status_code=HTTP_200_OK)
    async def commit_selection(
        self,
        user_id: str,
        data: CommitRequest,
        import_service: ProblemImportService,
    ) -> ImportResultResponse:
        records = [problem.to_record() for problem in data.problems]
        result = await import_service.commit_selection(user_id, records, data.source)
        return ImportResultResponse.from_result(result)

    @post("/import/retry", status_code=HTTP_200_OK)
    async def retry_commit(
        self, user_id: str, import_service: ProblemImportService
    ) -> ImportResultResponse:
        result = await import_service.retry_commit(user_id)
        return ImportResultResponse.from_result(result)

    @post("/import/link", status_code=HTTP_200_OK)
    async def import_link(
        self,
        user_id: str,
        data: LinkImportRequest,
        link_import_service: LinkImportService,
    ) -> ImportResultResponse:
        result = await link_import_service.import_from_link(user_id, data.url)
        return ImportResultResponse.from_result(result)

    @post("/sync-metadata", status_code=HTTP_200_OK)
    async def sync_metadata(
        self, user_id: str, metadata_sync_service: MetadataSyncService
    ) -> MetadataSyncResponse:
        updated = await metadata_sync_service.sync(user_id)
        return MetadataSyncResponse(updated_count=updated)
