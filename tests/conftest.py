"""Shared test fixtures."""

from pathlib import Path

import pytest
from aiohttp import web
from topicsheet.config import ClientConfig, Config, ServerConfig, SheetConfig
from topicsheet.core.model import Difficulty, Question, Sheet, Status, SubTopic, Topic
from topicsheet.core.service import SheetService
from topicsheet.core.store import SheetStore
from topicsheet.server import create_app


def make_sheet() -> Sheet:
    """Build a small consistent sheet.

    Arrays
        Easy: A, B, C
        Medium: D
    Graphs
        BFS: (empty)
    """
    return Sheet(
        id="1",
        title="Practice",
        slug="practice",
        topics=[
            Topic(
                id="t-arrays",
                title="Arrays",
                order=0,
                sub_topics=[
                    SubTopic(
                        id="s-easy",
                        title="Easy",
                        order=0,
                        questions=[
                            Question(id="q-a", title="A", link="https://a", order=0),
                            Question(
                                id="q-b",
                                title="B",
                                difficulty=Difficulty.EASY,
                                status=Status.SOLVED,
                                order=1,
                            ),
                            Question(id="q-c", title="C", difficulty=Difficulty.HARD, order=2),
                        ],
                    ),
                    SubTopic(
                        id="s-medium",
                        title="Medium",
                        order=1,
                        questions=[Question(id="q-d", title="D", order=0)],
                    ),
                ],
            ),
            Topic(
                id="t-graphs",
                title="Graphs",
                order=1,
                sub_topics=[SubTopic(id="s-bfs", title="BFS", order=0)],
            ),
        ],
    )


@pytest.fixture
def sheet() -> Sheet:
    return make_sheet()


@pytest.fixture
def store(sheet: Sheet) -> SheetStore:
    return SheetStore(sheet)


@pytest.fixture
def service(store: SheetStore) -> SheetService:
    return SheetService(store)


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Create a test configuration without a seed file."""
    return Config(
        server=ServerConfig(),
        sheet=SheetConfig(seed_path=tmp_path / "missing.json"),
        client=ClientConfig(),
    )


@pytest.fixture
def app(test_config: Config, store: SheetStore) -> web.Application:
    return create_app(test_config, store)


@pytest.fixture
def client(app: web.Application, aiohttp_client):
    """Create test client with configured app."""
    return aiohttp_client(app)
