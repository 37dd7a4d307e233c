"""GraphQL client for the problem site's public question API."""

from typing import Any

from loguru import logger

from domain.exceptions import LinkImportError
from infrastructure.errors import HTTPClientError
from infrastructure.parsers.interfaces import HTTPClientProtocol

FAVORITES_LIST_QUERY = """
query favoritesList($listId: String!) {
    favoritesList(listId: $listId) {
        questions { titleSlug title difficulty }
    }
}
"""

STUDY_PLAN_QUERY = """
query studyPlanDetail($slug: String!) {
    studyPlanV2Detail(planSlug: $slug) {
        planSubGroups {
            questions { titleSlug title difficulty }
        }
    }
}
"""

TAG_QUERY = """
query problemsetQuestionList($categorySlug: String, $filters: QuestionListFilterInput) {
    problemsetQuestionList: questionList(categorySlug: $categorySlug, filters: $filters) {
        questions { titleSlug title difficulty }
    }
}
"""

QUESTION_QUERY = """
query questionTitle($titleSlug: String!) {
    question(titleSlug: $titleSlug) {
        titleSlug title difficulty
        topicTags { name }
    }
}
"""

Question = dict[str, Any]


class LeetCodeClient:
    """Fetches question lists and single-question metadata over GraphQL."""

    def __init__(self, http_client: HTTPClientProtocol, graphql_url: str):
        self.http_client = http_client
        self.graphql_url = graphql_url

    async def _query(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        try:
            data = await self.http_client.post_json(
                self.graphql_url, {"query": query, "variables": variables}
            )
        except HTTPClientError as e:
            raise LinkImportError(f"GraphQL request failed: {e}") from e

        if data.get("errors"):
            message = data["errors"][0].get("message") or "GraphQL error"
            raise LinkImportError(message)
        return data.get("data") or {}

    async def fetch_list_questions(self, list_id: str) -> list[Question]:
        data = await self._query(FAVORITES_LIST_QUERY, {"listId": list_id})
        return (data.get("favoritesList") or {}).get("questions") or []

    async def fetch_study_plan_questions(self, plan_slug: str) -> list[Question]:
        data = await self._query(STUDY_PLAN_QUERY, {"slug": plan_slug})
        groups = (data.get("studyPlanV2Detail") or {}).get("planSubGroups") or []
        return [question for group in groups for question in group.get("questions") or []]

    async def fetch_tag_questions(self, tag_slug: str) -> list[Question]:
        data = await self._query(TAG_QUERY, {"categorySlug": "", "filters": {"tags": [tag_slug]}})
        return (data.get("problemsetQuestionList") or {}).get("questions") or []

    async def fetch_question(self, title_slug: str) -> Question | None:
        data = await self._query(QUESTION_QUERY, {"titleSlug": title_slug})
        question = data.get("question")
        if question is None:
            logger.debug(f"No question found for slug {title_slug}")
        return question
