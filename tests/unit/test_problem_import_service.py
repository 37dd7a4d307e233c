"""Unit tests for the file import pipeline."""

import asyncio
import io
import zipfile
from unittest.mock import AsyncMock

import pytest

from domain.exceptions import (
    FileParseError,
    FileReadError,
    ImportInProgressError,
    NoMatchesFoundError,
    PersistenceError,
    StaleResultError,
    UnsupportedFormatError,
)
from domain.models import Difficulty, ImportState, Status
from infrastructure.concurrency import ImportGate
from infrastructure.document_store import InMemoryDocumentStore
from infrastructure.errors import HTTPClientError
from services.collection import ProblemCollection
from services.link_import import LinkImportService
from services.problem import ProblemService
from services.problem_import import ProblemImportService, read_source

TEXT_FILE = b"""# Week 1
- https://leetcode.com/problems/two-sum/
- https://leetcode.com/problems/contains-duplicate/description/
- https://leetcode.com/problems/two-sum/?envType=daily
- https://leetcode.com/problems/reverse-bits/
"""

CSV_FILE = (
    b"Title,Link\n"
    b"Two Sum,https://x/problems/two-sum/?tab=1\n"
    b"Two Sum,https://x/problems/two-sum\n"
)


class FlakyStore(InMemoryDocumentStore):
    def __init__(self, documents=None):
        super().__init__(documents)
        self.fail_writes = True

    async def update(self, user_id, fields):
        if self.fail_writes:
            raise ConnectionError("store unavailable")
        await super().update(user_id, fields)


@pytest.mark.asyncio
async def test_csv_rows_with_same_slug_are_deduplicated(import_service, store):
    result = await import_service.import_file("u1", "problems.csv", CSV_FILE)

    assert result.added_count == 1
    assert result.state == ImportState.COMMITTED
    document = await store.get("u1")
    assert [p["titleSlug"] for p in document["problems"]] == ["two-sum"]
    assert document["problems"][0]["difficulty"] == "Easy"
    assert document["problems"][0]["sourceSheets"] == ["problems.csv"]


@pytest.mark.asyncio
async def test_text_import_builds_records_from_slugs(import_service, store):
    result = await import_service.import_file("u1", "plan.md", TEXT_FILE)

    assert result.added_count == 3
    problems = {p["titleSlug"]: p for p in (await store.get("u1"))["problems"]}
    assert list(problems) == ["two-sum", "contains-duplicate", "reverse-bits"]
    assert problems["two-sum"]["title"] == "Two Sum"
    assert problems["two-sum"]["url"] == "https://leetcode.com/problems/two-sum/"
    assert problems["contains-duplicate"]["type"] == "Arrays & Hashing"
    assert problems["reverse-bits"]["difficulty"] == "Unknown"
    assert problems["reverse-bits"]["type"] == "Uncategorized"
    assert all(p["addedAt"] for p in problems.values())


@pytest.mark.asyncio
async def test_reimport_is_idempotent(import_service, store):
    await import_service.import_file("u1", "plan.txt", TEXT_FILE)
    before = await store.get("u1")

    result = await import_service.import_file("u1", "plan.txt", TEXT_FILE)

    assert result.added_count == 0
    assert await store.get("u1") == before


@pytest.mark.asyncio
async def test_import_does_not_overwrite_existing_status(catalog):
    store = InMemoryDocumentStore(
        {
            "u1": {
                "problems": [
                    {
                        "title": "Two Sum",
                        "titleSlug": "two-sum",
                        "difficulty": "Easy",
                        "status": "Done",
                        "completedDate": "2024-05-01T10:00:00+00:00",
                    }
                ]
            }
        }
    )
    service = ProblemImportService(collection=ProblemCollection(store), catalog=catalog)

    result = await service.import_file("u1", "plan.txt", TEXT_FILE)

    assert result.added_count == 2
    two_sum = next(p for p in (await store.get("u1"))["problems"] if p["titleSlug"] == "two-sum")
    assert two_sum["status"] == "Done"
    assert two_sum["completedDate"] == "2024-05-01T10:00:00+00:00"


@pytest.mark.asyncio
async def test_unsupported_format_writes_nothing(import_service, store):
    with pytest.raises(UnsupportedFormatError):
        await import_service.import_file("u1", "photo.png", b"\x89PNG")

    assert await store.get("u1") is None


@pytest.mark.asyncio
async def test_no_matches_is_reported_without_write(import_service, store):
    with pytest.raises(NoMatchesFoundError):
        await import_service.import_file("u1", "notes.txt", b"nothing to see here")

    assert await store.get("u1") is None
    assert not import_service.is_importing("u1")


@pytest.mark.asyncio
async def test_parse_error_aborts_before_merge(import_service, store):
    with pytest.raises(FileParseError):
        await import_service.import_file("u1", "plan.docx", b"corrupt")

    assert await store.get("u1") is None


@pytest.mark.asyncio
async def test_read_error_aborts_import(import_service):
    class BrokenFile:
        def read(self):
            raise OSError("device not ready")

    with pytest.raises(FileReadError):
        await import_service.import_file("u1", "plan.txt", BrokenFile())


def test_read_source_accepts_file_objects():
    assert read_source(io.BytesIO(b"abc")) == b"abc"
    assert read_source(bytearray(b"abc")) == b"abc"


@pytest.mark.asyncio
async def test_docx_import(import_service, store):
    xml = (
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        "<w:body><w:p><w:r><w:t>https://leetcode.com/problems/lru-cache/</w:t></w:r></w:p></w:body>"
        "</w:document>"
    )
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("word/document.xml", xml)

    result = await import_service.import_file("u1", "Week.DOCX", buffer.getvalue())

    assert result.added_count == 1
    assert result.merged[0].difficulty == Difficulty.MEDIUM


@pytest.mark.asyncio
async def test_metadata_failure_degrades_to_unknown(import_service, http_client, store):
    http_client.get_text.side_effect = HTTPClientError("offline", "url")

    result = await import_service.import_file("u1", "plan.txt", TEXT_FILE)

    assert result.added_count == 3
    assert {p.difficulty for p in result.merged} == {Difficulty.UNKNOWN}
    assert {p.type for p in result.merged} == {"Uncategorized"}


@pytest.mark.asyncio
async def test_persistence_failure_keeps_result_for_retry(catalog):
    store = FlakyStore()
    service = ProblemImportService(collection=ProblemCollection(store), catalog=catalog)

    with pytest.raises(PersistenceError) as exc_info:
        await service.import_file("u1", "plan.txt", TEXT_FILE)

    assert exc_info.value.result.added_count == 3
    assert exc_info.value.result.state == ImportState.FAILED
    assert await store.get("u1") is None
    pending = service.pending_commit("u1")
    assert [r.title_slug for r in pending.records] == ["two-sum", "contains-duplicate", "reverse-bits"]
    assert pending.source == "plan.txt"

    store.fail_writes = False
    result = await service.retry_commit("u1")

    assert result.state == ImportState.COMMITTED
    assert len((await store.get("u1"))["problems"]) == 3
    assert service.pending_commit("u1") is None


@pytest.mark.asyncio
async def test_retry_keeps_edits_saved_after_the_failure(catalog):
    store = FlakyStore({"u1": {"problems": [{"title": "Two Sum", "titleSlug": "two-sum"}]}})
    collection = ProblemCollection(store)
    service = ProblemImportService(collection=collection, catalog=catalog)

    with pytest.raises(PersistenceError):
        await service.import_file("u1", "cache.txt", b"https://leetcode.com/problems/lru-cache/")

    store.fail_writes = False
    await ProblemService(collection).update_status("u1", "two-sum", Status.DONE)

    result = await service.retry_commit("u1")

    assert result.added_count == 1
    problems = {p["titleSlug"]: p for p in (await store.get("u1"))["problems"]}
    assert list(problems) == ["two-sum", "lru-cache"]
    assert problems["two-sum"]["status"] == "Done"
    assert problems["two-sum"]["completedDate"]
    assert service.pending_commit("u1") is None


@pytest.mark.asyncio
async def test_retry_without_pending_commit(import_service):
    with pytest.raises(PersistenceError):
        await import_service.retry_commit("u1")


@pytest.mark.asyncio
async def test_concurrent_import_for_same_user_is_rejected(import_service, http_client, catalog_csv):
    release = asyncio.Event()

    async def slow_catalog(url):
        await release.wait()
        return catalog_csv

    http_client.get_text.side_effect = slow_catalog

    first = asyncio.create_task(import_service.import_file("u1", "plan.txt", TEXT_FILE))
    while not import_service.is_importing("u1"):
        await asyncio.sleep(0)

    with pytest.raises(ImportInProgressError):
        await import_service.import_file("u1", "other.txt", TEXT_FILE)

    release.set()
    result = await first
    assert result.added_count == 3
    assert not import_service.is_importing("u1")


@pytest.mark.asyncio
async def test_link_import_waits_for_in_flight_file_import(collection, catalog, http_client, catalog_csv):
    gate = ImportGate()
    file_service = ProblemImportService(collection=collection, catalog=catalog, gate=gate)
    client = AsyncMock()
    client.fetch_list_questions.return_value = [{"titleSlug": "lru-cache", "title": "LRU Cache"}]
    link_service = LinkImportService(collection=collection, client=client, gate=gate)
    release = asyncio.Event()

    async def slow_catalog(url):
        await release.wait()
        return catalog_csv

    http_client.get_text.side_effect = slow_catalog

    first = asyncio.create_task(file_service.import_file("u1", "plan.txt", TEXT_FILE))
    while not file_service.is_importing("u1"):
        await asyncio.sleep(0)

    with pytest.raises(ImportInProgressError):
        await link_service.import_from_link("u1", "https://leetcode.com/list/abc/")

    release.set()
    await first
    result = await link_service.import_from_link("u1", "https://leetcode.com/list/abc/")

    assert result.added_count == 1
    slugs = [p.title_slug for p in await collection.load("u1")]
    assert slugs == ["two-sum", "contains-duplicate", "reverse-bits", "lru-cache"]


@pytest.mark.asyncio
async def test_preview_flags_new_and_existing(catalog):
    store = InMemoryDocumentStore({"u1": {"problems": [{"title": "Two Sum", "titleSlug": "two-sum"}]}})
    service = ProblemImportService(collection=ProblemCollection(store), catalog=catalog)

    batch = await service.preview_file("u1", "plan.txt", TEXT_FILE)

    flags = {c.record.title_slug: (c.is_new, c.selected) for c in batch.candidates}
    assert flags == {
        "two-sum": (False, False),
        "contains-duplicate": (True, True),
        "reverse-bits": (True, True),
    }
    assert (batch.total_found, batch.new_count, batch.existing_count) == (3, 2, 1)
    assert (await store.get("u1"))["problems"] == [{"title": "Two Sum", "titleSlug": "two-sum"}]

    result = await service.commit_selection("u1", batch.selected_records()[:1])

    assert result.added_count == 1
    slugs = [p["titleSlug"] for p in (await store.get("u1"))["problems"]]
    assert slugs == ["two-sum", "contains-duplicate"]


@pytest.mark.asyncio
async def test_commit_selection_requires_records(import_service):
    with pytest.raises(NoMatchesFoundError):
        await import_service.commit_selection("u1", [])


@pytest.mark.asyncio
async def test_superseded_preview_is_discarded(import_service, http_client, catalog_csv):
    release = asyncio.Event()

    async def slow_catalog(url):
        await release.wait()
        return catalog_csv

    http_client.get_text.side_effect = slow_catalog

    older = asyncio.create_task(import_service.preview_file("u1", "old.txt", TEXT_FILE))
    await asyncio.sleep(0)
    newer = asyncio.create_task(import_service.preview_file("u1", "new.csv", CSV_FILE))
    await asyncio.sleep(0)
    release.set()

    older_result, newer_result = await asyncio.gather(older, newer, return_exceptions=True)

    assert isinstance(older_result, StaleResultError)
    assert newer_result.source == "new.csv"
    assert [c.record.title_slug for c in newer_result.candidates] == ["two-sum"]


@pytest.mark.asyncio
async def test_done_status_from_sheet_is_kept_on_new_records(import_service):
    data = b"Problem,Status\nTwo Sum,solved\nLRU Cache,todo\n"

    result = await import_service.import_file("u1", "sheet.csv", data)

    statuses = {p.title_slug: p.status for p in result.merged}
    assert statuses == {"two-sum": Status.DONE, "lru-cache": Status.TODO}
