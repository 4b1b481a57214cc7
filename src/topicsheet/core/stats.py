"""Progress statistics for a sheet."""

from dataclasses import dataclass
from typing import TypedDict

from topicsheet.core.model import Difficulty, Sheet, Status


class TopicCountDict(TypedDict):
    """Question count for one topic."""

    id: str
    title: str
    questions: int


class SheetStatsDict(TypedDict):
    """Dictionary representation of sheet statistics."""

    total: int
    solved: int
    byTopic: list[TopicCountDict]
    byDifficulty: dict[str, int]
    byStatus: dict[str, int]


@dataclass(frozen=True)
class TopicCount:
    id: str
    title: str
    questions: int


@dataclass(frozen=True)
class SheetStats:
    """Aggregated counts over every question in a sheet."""

    total: int
    by_topic: list[TopicCount]
    by_difficulty: dict[Difficulty, int]
    by_status: dict[Status, int]

    @property
    def solved(self) -> int:
        return self.by_status[Status.SOLVED]

    def to_dict(self) -> SheetStatsDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "total": self.total,
            "solved": self.solved,
            "byTopic": [
                {"id": item.id, "title": item.title, "questions": item.questions}
                for item in self.by_topic
            ],
            "byDifficulty": {str(k): v for k, v in self.by_difficulty.items()},
            "byStatus": {str(k): v for k, v in self.by_status.items()},
        }


def compute_stats(sheet: Sheet) -> SheetStats:
    """Count questions per topic, per difficulty and per status.

    Topics keep sheet order. Every difficulty and status appears in the
    result, with zero when unused.
    """
    by_difficulty = dict.fromkeys(Difficulty, 0)
    by_status = dict.fromkeys(Status, 0)
    by_topic: list[TopicCount] = []

    for topic in sheet.topics:
        count = 0
        for sub_topic in topic.sub_topics:
            for question in sub_topic.questions:
                count += 1
                by_difficulty[question.difficulty] += 1
                by_status[question.status] += 1
        by_topic.append(TopicCount(id=topic.id, title=topic.title, questions=count))

    return SheetStats(
        total=sum(item.questions for item in by_topic),
        by_topic=by_topic,
        by_difficulty=by_difficulty,
        by_status=by_status,
    )
