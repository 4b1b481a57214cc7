"""Tests for sheet invariant checks."""

from topicsheet.core.model import Question, Sheet, SubTopic, Topic
from topicsheet.core.validation import duplicate_id_errors, order_errors, validate_sheet


class TestValidateSheet:
    """Tests for validate_sheet()."""

    def test__consistent_sheet__no_violations(self, sheet: Sheet) -> None:
        assert validate_sheet(sheet) == []

    def test__empty_sheet__no_violations(self) -> None:
        assert validate_sheet(Sheet(id="1", title="Empty", slug="empty")) == []

    def test__duplicate_question_across_subtopics__reported(self, sheet: Sheet) -> None:
        """Question ids are unique sheet-wide, not only per parent."""
        sheet.topics[1].sub_topics[0].questions.append(Question(id="q-a", title="Copy"))

        errors = duplicate_id_errors(sheet)

        assert errors == ["duplicate question id 'q-a' (2 times)"]

    def test__duplicate_topic__reported(self, sheet: Sheet) -> None:
        sheet.topics.append(Topic(id="t-arrays", title="Again", order=2))

        assert validate_sheet(sheet) == ["duplicate topic id 't-arrays' (2 times)"]

    def test__gap_in_orders__reported(self, sheet: Sheet) -> None:
        sheet.topics[0].sub_topics[0].questions[2].order = 5

        errors = order_errors(sheet)

        assert errors == ["children of sub-topic s-easy have order [0, 1, 5], expected 0..2"]

    def test__orders_not_following_list_position__reported(self) -> None:
        """A dense but shuffled numbering still counts as a violation."""
        sheet = Sheet(
            id="1",
            title="S",
            slug="s",
            topics=[
                Topic(
                    id="t",
                    title="T",
                    order=0,
                    sub_topics=[
                        SubTopic(id="a", title="A", order=1),
                        SubTopic(id="b", title="B", order=0),
                    ],
                ),
            ],
        )

        assert validate_sheet(sheet) == ["children of topic t have order [1, 0], expected 0..1"]
