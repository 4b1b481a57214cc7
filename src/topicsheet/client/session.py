"""Client session keeping a local sheet in sync with the server.

Each call registers a pending mutation on the projection, sends the
request, then confirms it with the server's answer or marks it failed and
re-raises. The local sheet only ever changes on a confirmed result.
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from topicsheet.client.api import SheetClient
from topicsheet.core.model import Question, Sheet, SubTopic, Topic
from topicsheet.core.projection import MutationKind, PendingMutation, SheetProjection

T = TypeVar("T")


def _ignore(_: Any) -> None:
    return None


def _many(parse: Callable[[Any], T]) -> Callable[[Any], list[T]]:
    return lambda items: [parse(item) for item in items]


class SheetSession:
    """Local sheet copy driven through a SheetClient."""

    def __init__(self, client: SheetClient, projection: SheetProjection | None = None) -> None:
        self.client = client
        self.projection = projection or SheetProjection()

    @property
    def sheet(self) -> Sheet | None:
        return self.projection.sheet

    async def fetch(self, slug: str | None = None) -> Sheet:
        mutation = self.projection.begin(MutationKind.FETCH)
        return await self._send(mutation, self.client.get_sheet(slug), Sheet.from_dict)

    async def replace_sheet(self, sheet: Sheet) -> Sheet:
        mutation = self.projection.begin(MutationKind.REPLACE_SHEET)
        return await self._send(
            mutation, self.client.replace_sheet(sheet.to_dict()), Sheet.from_dict
        )

    async def reorder(self, topics: list[Topic]) -> Sheet:
        """Submit a locally reshuffled topic tree.

        The local sheet keeps its previous order until the server confirms.
        """
        mutation = self.projection.begin(MutationKind.REORDER)
        return await self._send(
            mutation,
            self.client.reorder([topic.to_dict() for topic in topics]),
            Sheet.from_dict,
        )

    async def add_topic(self, title: str) -> Topic:
        mutation = self.projection.begin(MutationKind.ADD)
        return await self._send(mutation, self.client.add_topic(title), Topic.from_dict)

    async def rename_topic(self, topic_id: str, title: str) -> Topic:
        mutation = self.projection.begin(MutationKind.UPDATE, topic_id)
        return await self._send(
            mutation, self.client.rename_topic(topic_id, title), Topic.from_dict
        )

    async def delete_topic(self, topic_id: str) -> None:
        mutation = self.projection.begin(MutationKind.DELETE, topic_id)
        await self._send(mutation, self.client.delete_topic(topic_id), _ignore)

    async def move_topic(self, topic_id: str, index: int) -> list[Topic]:
        mutation = self.projection.begin(MutationKind.MOVE, topic_id)
        return await self._send(
            mutation, self.client.move_topic(topic_id, index), _many(Topic.from_dict)
        )

    async def add_subtopic(self, topic_id: str, title: str) -> SubTopic:
        mutation = self.projection.begin(MutationKind.ADD, topic_id)
        return await self._send(
            mutation, self.client.add_subtopic(topic_id, title), SubTopic.from_dict
        )

    async def rename_subtopic(self, topic_id: str, subtopic_id: str, title: str) -> SubTopic:
        mutation = self.projection.begin(MutationKind.UPDATE, topic_id, subtopic_id)
        return await self._send(
            mutation,
            self.client.rename_subtopic(topic_id, subtopic_id, title),
            SubTopic.from_dict,
        )

    async def delete_subtopic(self, topic_id: str, subtopic_id: str) -> None:
        mutation = self.projection.begin(MutationKind.DELETE, topic_id, subtopic_id)
        await self._send(mutation, self.client.delete_subtopic(topic_id, subtopic_id), _ignore)

    async def move_subtopic(self, topic_id: str, subtopic_id: str, index: int) -> list[SubTopic]:
        mutation = self.projection.begin(MutationKind.MOVE, topic_id, subtopic_id)
        return await self._send(
            mutation,
            self.client.move_subtopic(topic_id, subtopic_id, index),
            _many(SubTopic.from_dict),
        )

    async def add_question(
        self, topic_id: str, subtopic_id: str, data: dict[str, Any]
    ) -> Question:
        mutation = self.projection.begin(MutationKind.ADD, topic_id, subtopic_id)
        return await self._send(
            mutation,
            self.client.add_question(topic_id, subtopic_id, data),
            Question.from_dict,
        )

    async def update_question(
        self,
        topic_id: str,
        subtopic_id: str,
        question_id: str,
        patch: dict[str, Any],
    ) -> Question:
        mutation = self.projection.begin(
            MutationKind.UPDATE, topic_id, subtopic_id, question_id
        )
        return await self._send(
            mutation,
            self.client.update_question(topic_id, subtopic_id, question_id, patch),
            Question.from_dict,
        )

    async def delete_question(self, topic_id: str, subtopic_id: str, question_id: str) -> None:
        mutation = self.projection.begin(
            MutationKind.DELETE, topic_id, subtopic_id, question_id
        )
        await self._send(
            mutation,
            self.client.delete_question(topic_id, subtopic_id, question_id),
            _ignore,
        )

    async def move_question(
        self,
        topic_id: str,
        subtopic_id: str,
        question_id: str,
        index: int,
    ) -> list[Question]:
        mutation = self.projection.begin(MutationKind.MOVE, topic_id, subtopic_id, question_id)
        return await self._send(
            mutation,
            self.client.move_question(topic_id, subtopic_id, question_id, index),
            _many(Question.from_dict),
        )

    async def _send(
        self,
        mutation: PendingMutation,
        request: Awaitable[Any],
        parse: Callable[[Any], T],
    ) -> T:
        """Await the request, then confirm or fail the mutation.

        Raises:
            SheetApiError: If the server rejected the mutation
            httpx.HTTPError: If the request failed at the transport level
        """
        try:
            result = parse(await request)
        except Exception as e:
            self.projection.fail(mutation, e)
            raise
        self.projection.confirm(mutation, result)
        return result
