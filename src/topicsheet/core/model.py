"""Sheet entity model.

Records for the Sheet → Topic → SubTopic → Question hierarchy, the
validation predicates that guard them, and conversion to and from the
JSON shape used on the wire and in seed files.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Self, TypedDict, cast

from topicsheet.core.errors import InvalidInputError


class Difficulty(StrEnum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Status(StrEnum):
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    SOLVED = "Solved"


DEFAULT_DIFFICULTY = Difficulty.MEDIUM
DEFAULT_STATUS = Status.NOT_STARTED


class QuestionDict(TypedDict):
    """Dictionary representation of a question."""

    id: str
    title: str
    link: str
    difficulty: str
    status: str
    order: int


class SubTopicDict(TypedDict):
    """Dictionary representation of a sub-topic."""

    id: str
    title: str
    order: int
    questions: list[QuestionDict]


class TopicDict(TypedDict):
    """Dictionary representation of a topic."""

    id: str
    title: str
    order: int
    subTopics: list[SubTopicDict]


class SheetDict(TypedDict):
    """Dictionary representation of a sheet."""

    id: str
    title: str
    slug: str
    topics: list[TopicDict]


_DIFFICULTY_VALUES = frozenset(difficulty.value for difficulty in Difficulty)
_STATUS_VALUES = frozenset(status.value for status in Status)


def is_valid_difficulty(value: object) -> bool:
    return isinstance(value, str) and value in _DIFFICULTY_VALUES


def is_valid_status(value: object) -> bool:
    return isinstance(value, str) and value in _STATUS_VALUES


def is_non_empty_title(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def normalize_difficulty(value: object) -> Difficulty:
    """Map a raw value to a Difficulty, falling back to Medium."""
    if is_valid_difficulty(value):
        return Difficulty(value)
    return DEFAULT_DIFFICULTY


def normalize_status(value: object) -> Status:
    """Map a raw value to a Status, falling back to Not Started.

    Legacy records carry no status field at all; they read as Not Started.
    """
    if is_valid_status(value):
        return Status(value)
    return DEFAULT_STATUS


def require_title(value: object, kind: str) -> str:
    """Return the title or raise InvalidInputError if it is empty.

    Args:
        value: Raw title value
        kind: Node kind used in the error message

    Returns:
        The title unchanged
    """
    if not is_non_empty_title(value):
        raise InvalidInputError(f"{kind} title is required")
    return cast(str, value)


@dataclass
class Question:
    """A practice item, the leaf of the hierarchy."""

    id: str
    title: str
    link: str = ""
    difficulty: Difficulty = DEFAULT_DIFFICULTY
    status: Status = DEFAULT_STATUS
    order: int = 0

    def __post_init__(self) -> None:
        require_title(self.title, "Question")
        self.difficulty = normalize_difficulty(self.difficulty)
        self.status = normalize_status(self.status)

    def to_dict(self) -> QuestionDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "link": self.link,
            "difficulty": str(self.difficulty),
            "status": str(self.status),
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data: Any, position: int = 0) -> Self:
        """Build a question from its dictionary form.

        Args:
            data: Raw question mapping
            position: Fallback order when the record has none

        Returns:
            Question with difficulty and status normalized
        """
        _require_mapping(data, "Question")
        link = data.get("link")
        return cls(
            id=_require_id(data, "Question"),
            title=require_title(data.get("title"), "Question"),
            link=link if isinstance(link, str) else "",
            difficulty=normalize_difficulty(data.get("difficulty")),
            status=normalize_status(data.get("status")),
            order=_order_of(data, position),
        )


@dataclass
class SubTopic:
    """Group of questions within a topic."""

    id: str
    title: str
    order: int = 0
    questions: list[Question] = field(default_factory=list)

    def __post_init__(self) -> None:
        require_title(self.title, "Sub-topic")

    def to_dict(self) -> SubTopicDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "order": self.order,
            "questions": [question.to_dict() for question in self.questions],
        }

    @classmethod
    def from_dict(cls, data: Any, position: int = 0) -> Self:
        _require_mapping(data, "Sub-topic")
        return cls(
            id=_require_id(data, "Sub-topic"),
            title=require_title(data.get("title"), "Sub-topic"),
            order=_order_of(data, position),
            questions=[
                Question.from_dict(item, i)
                for i, item in enumerate(_list_of(data, "questions"))
            ],
        )


@dataclass
class Topic:
    """Top-level group of sub-topics."""

    id: str
    title: str
    order: int = 0
    sub_topics: list[SubTopic] = field(default_factory=list)

    def __post_init__(self) -> None:
        require_title(self.title, "Topic")

    def to_dict(self) -> TopicDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "order": self.order,
            "subTopics": [sub_topic.to_dict() for sub_topic in self.sub_topics],
        }

    @classmethod
    def from_dict(cls, data: Any, position: int = 0) -> Self:
        _require_mapping(data, "Topic")
        return cls(
            id=_require_id(data, "Topic"),
            title=require_title(data.get("title"), "Topic"),
            order=_order_of(data, position),
            sub_topics=[
                SubTopic.from_dict(item, i)
                for i, item in enumerate(_list_of(data, "subTopics"))
            ],
        )


@dataclass
class Sheet:
    """Root aggregate holding an ordered list of topics."""

    id: str
    title: str
    slug: str
    topics: list[Topic] = field(default_factory=list)

    def to_dict(self) -> SheetDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "topics": [topic.to_dict() for topic in self.topics],
        }

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        """Build a sheet from its dictionary form.

        Order fields are kept exactly as given; nothing is renumbered.

        Raises:
            InvalidInputError: If the structure is malformed or a title is empty
        """
        _require_mapping(data, "Sheet")
        title = data.get("title", "")
        slug = data.get("slug", "")
        return cls(
            id=_require_id(data, "Sheet"),
            title=title if isinstance(title, str) else str(title),
            slug=slug if isinstance(slug, str) else str(slug),
            topics=[
                Topic.from_dict(item, i)
                for i, item in enumerate(_list_of(data, "topics"))
            ],
        )

    def all_ids(self) -> set[str]:
        """Collect every topic, sub-topic and question id in the sheet."""
        ids: set[str] = set()
        for topic in self.topics:
            ids.add(topic.id)
            for sub_topic in topic.sub_topics:
                ids.add(sub_topic.id)
                ids.update(question.id for question in sub_topic.questions)
        return ids

    def question_count(self) -> int:
        return sum(
            len(sub_topic.questions)
            for topic in self.topics
            for sub_topic in topic.sub_topics
        )


def _require_mapping(data: object, kind: str) -> None:
    if not isinstance(data, dict):
        raise InvalidInputError(f"{kind} must be an object")


def _require_id(data: dict[str, Any], kind: str) -> str:
    value = data.get("id")
    if value is None or value == "":
        raise InvalidInputError(f"{kind} id is required")
    return str(value)


def _order_of(data: dict[str, Any], position: int) -> int:
    value = data.get("order")
    if isinstance(value, bool) or not isinstance(value, int):
        return position
    return value


def _list_of(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidInputError(f"{key} must be a list")
    return value
