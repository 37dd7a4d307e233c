"""Import problems from list, study plan and tag links."""

from loguru import logger

from domain.exceptions import NoMatchesFoundError
from domain.merge import merge_problems
from domain.models import Difficulty, ImportResult, ImportState, ProblemRecord
from domain.models.problem import utc_now_iso
from domain.parsers import URLParser
from infrastructure.concurrency import ImportGate
from infrastructure.leetcode_client import LeetCodeClient, Question

from .collection import ProblemCollection


class LinkImportService:
    """Resolves a problem-list link through GraphQL and merges the result."""

    def __init__(
        self,
        *,
        collection: ProblemCollection,
        client: LeetCodeClient,
        url_parser: type[URLParser] = URLParser,
        host: str | None = None,
        gate: ImportGate | None = None,
    ):
        self.collection = collection
        self.client = client
        self.url_parser = url_parser
        self.host = host
        self.gate = gate or ImportGate()

    async def import_from_link(self, user_id: str, url: str) -> ImportResult:
        kind, identifier = self.url_parser.parse_link(url)

        with self.gate.hold(user_id):
            questions = await self._fetch(kind, identifier)
            if not questions:
                raise NoMatchesFoundError(url)

            records = [self._to_record(q, url) for q in questions if q.get("titleSlug")]
            existing = await self.collection.load(user_id)
            merge = merge_problems(existing, records)
            if merge.added_count:
                await self.collection.save(user_id, merge.merged)

        logger.info(f"Imported {merge.added_count} new problem(s) from {kind} {identifier}")
        return ImportResult(
            user_id=user_id,
            source=url,
            added_count=merge.added_count,
            total_found=len(records),
            merged=merge.merged,
            state=ImportState.COMMITTED,
        )

    async def _fetch(self, kind: str, identifier: str) -> list[Question]:
        if kind == "list":
            return await self.client.fetch_list_questions(identifier)
        if kind == "studyplan":
            return await self.client.fetch_study_plan_questions(identifier)
        return await self.client.fetch_tag_questions(identifier)

    def _to_record(self, question: Question, source: str) -> ProblemRecord:
        slug = question["titleSlug"]
        return ProblemRecord(
            title=question.get("title") or slug,
            title_slug=slug,
            difficulty=Difficulty.parse(question.get("difficulty")),
            url=self.url_parser.build_problem_url(slug, self.host),
            source_sheets={source},
            added_at=utc_now_iso(),
        )
