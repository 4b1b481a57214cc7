"""Tree-aware mutations over the authoritative sheet.

Lookups walk the id path from the sheet down (topic, then sub-topic within
it, then question within that) with a linear scan per level. Hierarchies
are small, so O(depth x breadth) per call is acceptable. Structural changes
go through ``topicsheet.core.siblings``, which validates before it touches
anything; a call that raises leaves the tree as it was.
"""

import logging
import uuid
from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import Any

from topicsheet.core import siblings
from topicsheet.core.errors import InvalidInputError, NotFoundError
from topicsheet.core.model import (
    Question,
    Sheet,
    SubTopic,
    Topic,
    normalize_difficulty,
    normalize_status,
    require_title,
)
from topicsheet.core.store import SheetStore
from topicsheet.core.validation import duplicate_id_errors, validate_sheet

logger = logging.getLogger(__name__)

TOPIC = "Topic"
SUB_TOPIC = "Sub-topic"
QUESTION = "Question"


class SheetService:
    """CRUD, move and reorder operations on the sheet held by a store."""

    def __init__(self, store: SheetStore, *, strict: bool = False) -> None:
        """Initialize service.

        Args:
            store: Store holding the authoritative sheet
            strict: Validate bulk replacements before accepting them
        """
        self._store = store
        self.strict = strict

    @property
    def store(self) -> SheetStore:
        return self._store

    # Sheet

    def get_sheet(self, slug: str | None = None) -> Sheet:
        """Return the sheet, optionally checking its slug.

        Raises:
            NotFoundError: If slug is given and does not match
        """
        sheet = self._store.get()
        if slug is not None and slug != sheet.slug:
            raise NotFoundError("Sheet", slug)
        return sheet

    def replace_sheet(self, new_sheet: Sheet, *, strict: bool | None = None) -> Sheet:
        """Replace the whole tree with an externally supplied one.

        Trust boundary: in the default permissive mode the tree is stored
        verbatim, with no check of id uniqueness or order density. Callers
        restoring an export are expected to hand in a consistent tree. Strict
        mode runs ``validate_sheet`` first and rejects any violation.

        The slug is immutable in both modes: a tree without a slug keeps
        the current one, a tree with a different slug is rejected.

        Args:
            new_sheet: Replacement tree
            strict: Override the service-wide strict setting

        Returns:
            The stored sheet

        Raises:
            InvalidInputError: On a slug change, or on violations in strict mode
        """
        current = self._store.get()
        if not new_sheet.slug:
            new_sheet = replace(new_sheet, slug=current.slug)
        elif new_sheet.slug != current.slug:
            raise InvalidInputError(
                f"Sheet slug is immutable ({current.slug!r} != {new_sheet.slug!r})",
            )

        if self.strict if strict is None else strict:
            violations = validate_sheet(new_sheet)
            if violations:
                raise InvalidInputError("Invalid sheet: " + "; ".join(violations))

        self._store.replace(new_sheet)
        logger.info(
            f"Replaced sheet {new_sheet.slug!r} "
            f"({len(new_sheet.topics)} topics, {new_sheet.question_count()} questions)",
        )
        return new_sheet

    def reorder(self, new_topics: Sequence[Topic]) -> Sheet:
        """Commit a tree whose sibling sequences were reshuffled at any depth.

        Every level is renumbered to match list order in one pass: topics,
        each topic's sub-topics, each sub-topic's questions. The same input
        always yields the same tree.

        In strict mode the submitted tree must hold exactly the ids of the
        current tree, each once.

        Args:
            new_topics: Full topic list in the desired order

        Returns:
            The updated sheet

        Raises:
            InvalidInputError: In strict mode, if the id set differs
        """
        current = self._store.get()
        topics = list(new_topics)
        if self.strict:
            self._check_same_ids(current, topics)

        for topic in siblings.replace_all(topics):
            topic.sub_topics = siblings.replace_all(topic.sub_topics)
            for sub_topic in topic.sub_topics:
                sub_topic.questions = siblings.replace_all(sub_topic.questions)

        sheet = replace(current, topics=topics)
        self._store.replace(sheet)
        logger.info(f"Reordered sheet {sheet.slug!r} ({len(topics)} topics)")
        return sheet

    # Topics

    def add_topic(self, title: str) -> Topic:
        sheet = self._store.get()
        topic = Topic(id=self._new_id("topic"), title=require_title(title, TOPIC))
        sheet.topics = siblings.append(sheet.topics, topic)
        logger.info(f'Added topic {topic.id} "{topic.title}" at {topic.order}')
        return topic

    def rename_topic(self, topic_id: str, title: str) -> Topic:
        title = require_title(title, TOPIC)
        topic = self.get_topic(topic_id)
        topic.title = title
        logger.info(f'Renamed topic {topic_id} to "{title}"')
        return topic

    def delete_topic(self, topic_id: str) -> None:
        """Delete a topic together with all its sub-topics and questions."""
        sheet = self._store.get()
        sheet.topics = siblings.remove_by_id(sheet.topics, topic_id, TOPIC)
        logger.info(f"Deleted topic {topic_id}")

    def move_topic(self, topic_id: str, index: int) -> list[Topic]:
        sheet = self._store.get()
        sheet.topics = siblings.move_to(sheet.topics, topic_id, index, TOPIC)
        logger.info(f"Moved topic {topic_id} to {index}")
        return sheet.topics

    # Sub-topics

    def add_subtopic(self, topic_id: str, title: str) -> SubTopic:
        title = require_title(title, SUB_TOPIC)
        topic = self.get_topic(topic_id)
        sub_topic = SubTopic(id=self._new_id("subtopic"), title=title)
        topic.sub_topics = siblings.append(topic.sub_topics, sub_topic)
        logger.info(f'Added sub-topic {sub_topic.id} "{title}" to topic {topic_id}')
        return sub_topic

    def rename_subtopic(self, topic_id: str, subtopic_id: str, title: str) -> SubTopic:
        title = require_title(title, SUB_TOPIC)
        sub_topic = self.get_subtopic(topic_id, subtopic_id)
        sub_topic.title = title
        logger.info(f'Renamed sub-topic {subtopic_id} to "{title}"')
        return sub_topic

    def delete_subtopic(self, topic_id: str, subtopic_id: str) -> None:
        """Delete a sub-topic together with all its questions."""
        topic = self.get_topic(topic_id)
        topic.sub_topics = siblings.remove_by_id(topic.sub_topics, subtopic_id, SUB_TOPIC)
        logger.info(f"Deleted sub-topic {subtopic_id} from topic {topic_id}")

    def move_subtopic(self, topic_id: str, subtopic_id: str, index: int) -> list[SubTopic]:
        topic = self.get_topic(topic_id)
        topic.sub_topics = siblings.move_to(topic.sub_topics, subtopic_id, index, SUB_TOPIC)
        logger.info(f"Moved sub-topic {subtopic_id} to {index}")
        return topic.sub_topics

    # Questions

    def add_question(
        self,
        topic_id: str,
        subtopic_id: str,
        data: Mapping[str, Any],
    ) -> Question:
        """Append a question to a sub-topic.

        Args:
            topic_id: Parent topic id
            subtopic_id: Parent sub-topic id
            data: ``title`` (required), ``link``, ``difficulty``, ``status``

        Returns:
            The created question
        """
        title = require_title(data.get("title"), QUESTION)
        link = data.get("link") or ""
        if not isinstance(link, str):
            raise InvalidInputError("Question link must be a string")

        sub_topic = self.get_subtopic(topic_id, subtopic_id)
        question = Question(
            id=self._new_id("q"),
            title=title,
            link=link,
            difficulty=normalize_difficulty(data.get("difficulty")),
            status=normalize_status(data.get("status")),
        )
        sub_topic.questions = siblings.append(sub_topic.questions, question)
        logger.info(f'Added question {question.id} "{title}" to sub-topic {subtopic_id}')
        return question

    def update_question(
        self,
        topic_id: str,
        subtopic_id: str,
        question_id: str,
        patch: Mapping[str, Any],
    ) -> Question:
        """Apply a partial update to a question.

        Omitted fields keep their value. Empty ``title``, ``difficulty`` and
        ``status`` count as not provided. ``link`` is different: an explicit
        empty string clears it, only an absent or null link is ignored.

        Raises:
            NotFoundError: If any segment of the id path does not resolve
            InvalidInputError: If a provided value has the wrong type
        """
        question = self.get_question(topic_id, subtopic_id, question_id)

        title = patch.get("title")
        if title:
            title = require_title(title, QUESTION)
        link = patch.get("link")
        if link is not None and not isinstance(link, str):
            raise InvalidInputError("Question link must be a string")

        if title:
            question.title = title
        if link is not None:
            question.link = link
        if patch.get("difficulty"):
            question.difficulty = normalize_difficulty(patch["difficulty"])
        if patch.get("status"):
            question.status = normalize_status(patch["status"])

        logger.info(f"Updated question {question_id}")
        logger.debug(f"Question patch: {dict(patch)}")
        return question

    def delete_question(self, topic_id: str, subtopic_id: str, question_id: str) -> None:
        sub_topic = self.get_subtopic(topic_id, subtopic_id)
        sub_topic.questions = siblings.remove_by_id(sub_topic.questions, question_id, QUESTION)
        logger.info(f"Deleted question {question_id} from sub-topic {subtopic_id}")

    def move_question(
        self,
        topic_id: str,
        subtopic_id: str,
        question_id: str,
        index: int,
    ) -> list[Question]:
        sub_topic = self.get_subtopic(topic_id, subtopic_id)
        sub_topic.questions = siblings.move_to(
            sub_topic.questions, question_id, index, QUESTION
        )
        logger.info(f"Moved question {question_id} to {index}")
        return sub_topic.questions

    # Lookup

    def get_topic(self, topic_id: str) -> Topic:
        return siblings.find(self._store.get().topics, topic_id, TOPIC)

    def get_subtopic(self, topic_id: str, subtopic_id: str) -> SubTopic:
        topic = self.get_topic(topic_id)
        return siblings.find(topic.sub_topics, subtopic_id, SUB_TOPIC)

    def get_question(self, topic_id: str, subtopic_id: str, question_id: str) -> Question:
        sub_topic = self.get_subtopic(topic_id, subtopic_id)
        return siblings.find(sub_topic.questions, question_id, QUESTION)

    def _new_id(self, prefix: str) -> str:
        """Generate an id not used anywhere in the sheet."""
        taken = self._store.get().all_ids()
        while True:
            candidate = f"{prefix}-{uuid.uuid4().hex[:12]}"
            if candidate not in taken:
                return candidate

    def _check_same_ids(self, current: Sheet, topics: list[Topic]) -> None:
        submitted = replace(current, topics=topics)
        duplicates = duplicate_id_errors(submitted)
        if duplicates:
            raise InvalidInputError("Invalid reorder: " + "; ".join(duplicates))
        if submitted.all_ids() != current.all_ids():
            raise InvalidInputError("Invalid reorder: submitted tree does not match current ids")
