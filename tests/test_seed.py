"""Tests for initial sheet loading."""

import json
from pathlib import Path

import pytest
from topicsheet.core.errors import InvalidInputError
from topicsheet.core.model import Difficulty, Sheet, Status
from topicsheet.core.validation import validate_sheet
from topicsheet.seed import load_sheet, parse_seed, sample_sheet


def _dataset() -> dict:
    return {
        "data": {
            "sheet": {"_id": "abc", "name": "Striver A2Z", "slug": "striver-a2z"},
            "questions": [
                {
                    "_id": "101",
                    "topic": "Arrays",
                    "subTopic": "Easy",
                    "title": "Largest Element",
                    "isSolved": True,
                    "questionId": {"difficulty": "Easy", "problemUrl": "https://x/1"},
                },
                {
                    "topic": "Arrays",
                    "subTopic": "Medium",
                    "questionId": {"name": "Two Sum", "difficulty": "Medium"},
                },
                {
                    "_id": "103",
                    "topic": "Arrays",
                    "subTopic": "Easy",
                    "title": "Second Largest",
                },
                {"_id": "104", "title": "Orphan"},
            ],
        },
    }


class TestSampleSheet:
    """Tests for the built-in sample sheet."""

    def test__consistent(self) -> None:
        sheet = sample_sheet()

        assert sheet.slug == "striver-sde-sheet"
        assert [t.title for t in sheet.topics] == ["Arrays", "Linked List"]
        assert sheet.question_count() == 4
        assert validate_sheet(sheet) == []

    def test__every_question_not_started(self) -> None:
        sheet = sample_sheet()

        statuses = {
            q.status for t in sheet.topics for st in t.sub_topics for q in st.questions
        }
        assert statuses == {Status.NOT_STARTED}


class TestParseSeed:
    """Tests for parse_seed()."""

    def test__sheet_shape__parsed(self, sheet: Sheet) -> None:
        assert parse_seed(sheet.to_dict()) == sheet

    def test__wrapped_sheet_shape__parsed(self, sheet: Sheet) -> None:
        assert parse_seed({"data": sheet.to_dict()}) == sheet

    def test__dataset__grouped_in_first_seen_order(self) -> None:
        sheet = parse_seed(_dataset())

        assert (sheet.id, sheet.title, sheet.slug) == ("abc", "Striver A2Z", "striver-a2z")
        assert [(t.id, t.title) for t in sheet.topics] == [
            ("topic-1", "Arrays"),
            ("topic-2", "Misc"),
        ]
        easy, medium = sheet.topics[0].sub_topics
        assert [q.id for q in easy.questions] == ["101", "103"]
        assert [q.order for q in easy.questions] == [0, 1]
        assert medium.questions[0].title == "Two Sum"
        assert sheet.topics[1].sub_topics[0].title == "General"
        assert validate_sheet(sheet) == []

    def test__dataset__question_fields_mapped(self) -> None:
        sheet = parse_seed(_dataset())
        first = sheet.topics[0].sub_topics[0].questions[0]

        assert first.status is Status.SOLVED
        assert first.difficulty is Difficulty.EASY
        assert first.link == "https://x/1"

    def test__dataset__missing_ids_generated_unique(self) -> None:
        sheet = parse_seed(_dataset())
        question = sheet.topics[0].sub_topics[1].questions[0]

        assert question.id == "q-subtopic-topic-1-2-1"

    def test__not_an_object__raises(self) -> None:
        with pytest.raises(InvalidInputError):
            parse_seed([1, 2])


class TestLoadSheet:
    """Tests for load_sheet()."""

    def test__missing_file__falls_back_to_sample(self, tmp_path: Path) -> None:
        assert load_sheet(tmp_path / "missing.json") == sample_sheet()

    def test__none__falls_back_to_sample(self) -> None:
        assert load_sheet(None) == sample_sheet()

    def test__malformed_json__falls_back_to_sample(self, tmp_path: Path) -> None:
        path = tmp_path / "sheet.json"
        path.write_text("{broken")

        assert load_sheet(path) == sample_sheet()

    def test__invalid_structure__falls_back_to_sample(self, tmp_path: Path) -> None:
        path = tmp_path / "sheet.json"
        path.write_text(json.dumps({"id": "1", "topics": [{"id": "t", "title": ""}]}))

        assert load_sheet(path) == sample_sheet()

    def test__valid_file__loaded(self, tmp_path: Path, sheet: Sheet) -> None:
        path = tmp_path / "sheet.json"
        path.write_text(json.dumps(sheet.to_dict()))

        assert load_sheet(path) == sheet

    def test__invalid_utf8__falls_back_to_sample(self, tmp_path: Path) -> None:
        path = tmp_path / "sheet.json"
        path.write_bytes(b'{"id": "1", "title": "\xff\xfe"}')

        assert load_sheet(path) == sample_sheet()

    def test__dataset_question_meta_not_object__falls_back_to_sample(
        self, tmp_path: Path
    ) -> None:
        path = tmp_path / "sheet.json"
        path.write_text(json.dumps({"questions": [{"title": "X", "questionId": "abc"}]}))

        assert load_sheet(path) == sample_sheet()

    def test__dataset_sheet_meta_not_object__falls_back_to_sample(self, tmp_path: Path) -> None:
        path = tmp_path / "sheet.json"
        path.write_text(json.dumps({"sheet": ["x"], "questions": []}))

        assert load_sheet(path) == sample_sheet()


class TestDatasetFields:
    """Tests for malformed dataset fields."""

    @pytest.mark.parametrize(
        ("question", "message"),
        [
            ({"questionId": "abc"}, "questionId must be an object"),
            ({"topic": ["Arrays"]}, "topic must be a string"),
            ({"title": 5}, "title must be a string"),
            ({"questionId": {"problemUrl": 3}}, "problemUrl must be a string"),
        ],
    )
    def test__wrong_field_type__raises(self, question: dict, message: str) -> None:
        with pytest.raises(InvalidInputError, match=message):
            parse_seed({"questions": [question]})

    def test__empty_meta__defaults_used(self) -> None:
        sheet = parse_seed({"sheet": None, "questions": [{"questionId": None}]})

        assert sheet.slug == "striver-sheet"
        assert sheet.topics[0].sub_topics[0].questions[0].title == "Untitled Question"
