"""Topicsheet API client.

Async HTTP client for the sheet REST API. Each method returns the
``data`` payload of the response envelope and raises SheetApiError when the
server answers with ``success: false``.
"""

import logging
from typing import Any

import httpx

from topicsheet.core.model import QuestionDict, SheetDict, SubTopicDict, TopicDict
from topicsheet.core.stats import SheetStatsDict

logger = logging.getLogger(__name__)


class SheetApiError(Exception):
    """The server rejected a request."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message

    @property
    def not_found(self) -> bool:
        return self.status == 404


class SheetClient:
    """Async HTTP client for the Topicsheet REST API."""

    def __init__(self, client: httpx.AsyncClient, base_url: str):
        """Initialize sheet client.

        Args:
            client: httpx AsyncClient used for all requests
            base_url: Server base URL (e.g., http://127.0.0.1:5000)
        """
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}/api"

    async def get_sheet(self, slug: str | None = None) -> SheetDict:
        """Fetch the full sheet.

        Args:
            slug: Sheet slug; when given the slug-addressed endpoint is used

        Returns:
            Sheet data
        """
        if slug is None:
            return await self._request("GET", "/sheet")
        return await self._request(
            "GET",
            f"/question-tracker/v1/sheet/public/get-sheet-by-slug/{slug}",
        )

    async def replace_sheet(self, sheet: SheetDict | dict[str, Any]) -> SheetDict:
        return await self._request("PUT", "/sheet", json=sheet)

    async def reorder(self, topics: list[TopicDict] | list[dict[str, Any]]) -> SheetDict:
        return await self._request("PUT", "/sheet/reorder", json={"topics": topics})

    async def get_stats(self) -> SheetStatsDict:
        return await self._request("GET", "/sheet/stats")

    async def add_topic(self, title: str) -> TopicDict:
        return await self._request("POST", "/topics", json={"title": title})

    async def rename_topic(self, topic_id: str, title: str) -> TopicDict:
        return await self._request("PUT", f"/topics/{topic_id}", json={"title": title})

    async def delete_topic(self, topic_id: str) -> None:
        await self._request("DELETE", f"/topics/{topic_id}")

    async def move_topic(self, topic_id: str, index: int) -> list[TopicDict]:
        return await self._request("POST", f"/topics/{topic_id}/move", json={"index": index})

    async def add_subtopic(self, topic_id: str, title: str) -> SubTopicDict:
        return await self._request(
            "POST", f"/topics/{topic_id}/subtopics", json={"title": title}
        )

    async def rename_subtopic(self, topic_id: str, subtopic_id: str, title: str) -> SubTopicDict:
        return await self._request(
            "PUT", f"/topics/{topic_id}/subtopics/{subtopic_id}", json={"title": title}
        )

    async def delete_subtopic(self, topic_id: str, subtopic_id: str) -> None:
        await self._request("DELETE", f"/topics/{topic_id}/subtopics/{subtopic_id}")

    async def move_subtopic(
        self, topic_id: str, subtopic_id: str, index: int
    ) -> list[SubTopicDict]:
        return await self._request(
            "POST",
            f"/topics/{topic_id}/subtopics/{subtopic_id}/move",
            json={"index": index},
        )

    async def add_question(
        self, topic_id: str, subtopic_id: str, question: dict[str, Any]
    ) -> QuestionDict:
        return await self._request(
            "POST",
            f"/topics/{topic_id}/subtopics/{subtopic_id}/questions",
            json=question,
        )

    async def update_question(
        self,
        topic_id: str,
        subtopic_id: str,
        question_id: str,
        patch: dict[str, Any],
    ) -> QuestionDict:
        return await self._request(
            "PUT",
            f"/topics/{topic_id}/subtopics/{subtopic_id}/questions/{question_id}",
            json=patch,
        )

    async def delete_question(self, topic_id: str, subtopic_id: str, question_id: str) -> None:
        await self._request(
            "DELETE",
            f"/topics/{topic_id}/subtopics/{subtopic_id}/questions/{question_id}",
        )

    async def move_question(
        self,
        topic_id: str,
        subtopic_id: str,
        question_id: str,
        index: int,
    ) -> list[QuestionDict]:
        return await self._request(
            "POST",
            f"/topics/{topic_id}/subtopics/{subtopic_id}/questions/{question_id}/move",
            json={"index": index},
        )

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        """Send a request and unwrap the response envelope.

        Raises:
            SheetApiError: If the envelope reports failure
            httpx.HTTPError: If the request fails at the transport level
        """
        url = f"{self.api_url}{path}"
        logger.debug(f"{method} {url}")
        response = await self.client.request(method, url, json=json)

        try:
            body = response.json()
        except ValueError:
            response.raise_for_status()
            raise SheetApiError(response.status_code, "Response is not JSON") from None

        if not isinstance(body, dict) or not body.get("success"):
            message = body.get("message", "Request failed") if isinstance(body, dict) else str(body)
            logger.error(f"{method} {url} failed with {response.status_code}: {message}")
            raise SheetApiError(response.status_code, message)

        return body.get("data")
