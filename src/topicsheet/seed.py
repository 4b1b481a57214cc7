"""Initial sheet loading.

Accepts either a JSON document in the Sheet shape (optionally wrapped in
``{"data": ...}``) or a flat question dataset of the form::

    {"data": {"sheet": {"_id": ..., "name": ..., "slug": ...},
              "questions": [{"_id": ..., "topic": ..., "subTopic": ...,
                             "title": ..., "isSolved": ...,
                             "questionId": {"name": ..., "difficulty": ...,
                                            "problemUrl": ...}}]}}

Falls back to a small built-in sheet when no file is available or the file
cannot be parsed.
"""

import json
import logging
from pathlib import Path
from typing import Any

from topicsheet.core.errors import InvalidInputError
from topicsheet.core.model import (
    Question,
    Sheet,
    Status,
    SubTopic,
    Topic,
    normalize_difficulty,
)

logger = logging.getLogger(__name__)


def sample_sheet() -> Sheet:
    """Build the built-in fallback sheet."""
    return Sheet.from_dict(
        {
            "id": "1",
            "title": "Striver SDE Sheet",
            "slug": "striver-sde-sheet",
            "topics": [
                {
                    "id": "topic-1",
                    "title": "Arrays",
                    "subTopics": [
                        {
                            "id": "subtopic-1",
                            "title": "Easy",
                            "questions": [
                                {
                                    "id": "q-1",
                                    "title": "Set Matrix Zeroes",
                                    "link": "https://leetcode.com/problems/set-matrix-zeroes/",
                                    "difficulty": "Medium",
                                },
                                {
                                    "id": "q-2",
                                    "title": "Pascal's Triangle",
                                    "link": "https://leetcode.com/problems/pascals-triangle/",
                                    "difficulty": "Easy",
                                },
                            ],
                        },
                        {
                            "id": "subtopic-2",
                            "title": "Medium",
                            "questions": [
                                {
                                    "id": "q-3",
                                    "title": "Rotate Image",
                                    "link": "https://leetcode.com/problems/rotate-image/",
                                    "difficulty": "Medium",
                                },
                            ],
                        },
                    ],
                },
                {
                    "id": "topic-2",
                    "title": "Linked List",
                    "subTopics": [
                        {
                            "id": "subtopic-3",
                            "title": "Easy",
                            "questions": [
                                {
                                    "id": "q-4",
                                    "title": "Reverse Linked List",
                                    "link": "https://leetcode.com/problems/reverse-linked-list/",
                                    "difficulty": "Easy",
                                },
                            ],
                        },
                    ],
                },
            ],
        },
    )


def load_sheet(path: Path | None) -> Sheet:
    """Load the initial sheet, falling back to the sample sheet.

    Args:
        path: JSON file to load, or None

    Returns:
        Sheet built from the file, or the sample sheet if the file is
        missing, unreadable or malformed
    """
    if path is None or not path.exists():
        logger.warning(f"Seed file {path} not found, using built-in sample sheet")
        return sample_sheet()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        sheet = parse_seed(data)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, InvalidInputError) as e:
        logger.error(f"Failed to load seed file {path}: {e}. Using built-in sample sheet")
        return sample_sheet()

    logger.info(f'Loaded sheet "{sheet.title}" from {path} with {len(sheet.topics)} topics')
    return sheet


def parse_seed(data: Any) -> Sheet:
    """Build a sheet from a parsed seed document.

    Raises:
        InvalidInputError: If the document matches neither accepted shape
    """
    if not isinstance(data, dict):
        raise InvalidInputError("Seed document must be a JSON object")

    payload = data.get("data", data)
    if isinstance(payload, dict) and isinstance(payload.get("questions"), list):
        return build_from_dataset(payload)
    return Sheet.from_dict(payload)


def build_from_dataset(payload: dict[str, Any]) -> Sheet:
    """Group a flat question dataset into a sheet.

    Topics and sub-topics are created in the order they are first seen.
    Questions without a topic land in "Misc", without a sub-topic in
    "General".
    """
    meta = _object_field(payload, "sheet")
    topics: dict[str, Topic] = {}

    for raw in payload["questions"]:
        if not isinstance(raw, dict):
            raise InvalidInputError("Dataset questions must be objects")

        topic_title = _text_field(raw, "topic", "Misc")
        sub_topic_title = _text_field(raw, "subTopic", "General")

        topic = topics.get(topic_title)
        if topic is None:
            topic = Topic(
                id=f"topic-{len(topics) + 1}",
                title=topic_title,
                order=len(topics),
            )
            topics[topic_title] = topic

        sub_topic = next((st for st in topic.sub_topics if st.title == sub_topic_title), None)
        if sub_topic is None:
            sub_topic = SubTopic(
                id=f"subtopic-{topic.id}-{len(topic.sub_topics) + 1}",
                title=sub_topic_title,
                order=len(topic.sub_topics),
            )
            topic.sub_topics.append(sub_topic)

        question_meta = _object_field(raw, "questionId")
        fallback_title = _text_field(question_meta, "name", "Untitled Question")
        sub_topic.questions.append(
            Question(
                id=str(raw.get("_id") or f"q-{sub_topic.id}-{len(sub_topic.questions) + 1}"),
                title=_text_field(raw, "title", fallback_title),
                link=_text_field(question_meta, "problemUrl", ""),
                difficulty=normalize_difficulty(question_meta.get("difficulty")),
                status=Status.SOLVED if raw.get("isSolved") else Status.NOT_STARTED,
                order=len(sub_topic.questions),
            ),
        )

    return Sheet(
        id=str(meta.get("_id") or "1"),
        title=_text_field(meta, "name", "Striver Sheet"),
        slug=_text_field(meta, "slug", "striver-sheet"),
        topics=list(topics.values()),
    )


def _object_field(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise InvalidInputError(f"Dataset field {key} must be an object")
    return value


def _text_field(data: dict[str, Any], key: str, default: str) -> str:
    value = data.get(key)
    if not value:
        return default
    if not isinstance(value, str):
        raise InvalidInputError(f"Dataset field {key} must be a string")
    return value
