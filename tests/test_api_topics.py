"""Tests for topic, sub-topic and question API endpoints."""

import pytest
from topicsheet.core.store import SheetStore

QUESTIONS = "/api/topics/t-arrays/subtopics/s-easy/questions"


class TestTopicEndpoints:
    """Tests for /api/topics."""

    @pytest.mark.asyncio
    async def test__add__returns_201_with_topic(self, client) -> None:
        test_client = await client
        response = await test_client.post("/api/topics", json={"title": "Trees"})

        assert response.status == 201
        data = await response.json()
        assert data["success"] is True
        assert data["data"]["title"] == "Trees"
        assert data["data"]["order"] == 2
        assert data["data"]["subTopics"] == []

    @pytest.mark.asyncio
    async def test__add_blank_title__returns_400(self, client, store: SheetStore) -> None:
        test_client = await client
        response = await test_client.post("/api/topics", json={"title": "  "})

        assert response.status == 400
        assert await response.json() == {
            "success": False,
            "message": "Topic title is required",
        }
        assert len(store.get().topics) == 2

    @pytest.mark.asyncio
    async def test__body_not_object__returns_400(self, client) -> None:
        test_client = await client
        response = await test_client.post("/api/topics", json=["Trees"])

        assert response.status == 400
        assert (await response.json())["message"] == "Request body must be a JSON object"

    @pytest.mark.asyncio
    async def test__body_not_utf8__returns_400_envelope(
        self, client, store: SheetStore
    ) -> None:
        test_client = await client
        response = await test_client.post(
            "/api/topics",
            data=b'{"title": "\xff"}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status == 400
        assert await response.json() == {
            "success": False,
            "message": "Request body is not valid UTF-8",
        }
        assert len(store.get().topics) == 2

    @pytest.mark.asyncio
    async def test__rename(self, client) -> None:
        test_client = await client
        response = await test_client.put("/api/topics/t-graphs", json={"title": "Graph Theory"})

        assert response.status == 200
        assert (await response.json())["data"]["title"] == "Graph Theory"

    @pytest.mark.asyncio
    async def test__delete__returns_message(self, client, store: SheetStore) -> None:
        test_client = await client
        response = await test_client.delete("/api/topics/t-arrays")

        assert response.status == 200
        assert await response.json() == {"success": True, "message": "Topic deleted"}
        assert [(t.id, t.order) for t in store.get().topics] == [("t-graphs", 0)]

    @pytest.mark.asyncio
    async def test__delete_missing__returns_404(self, client) -> None:
        test_client = await client
        response = await test_client.delete("/api/topics/nope")

        assert response.status == 404
        assert (await response.json())["message"] == "Topic not found"

    @pytest.mark.asyncio
    async def test__move__returns_renumbered_siblings(self, client) -> None:
        test_client = await client
        response = await test_client.post("/api/topics/t-graphs/move", json={"index": 0})

        assert response.status == 200
        data = await response.json()
        assert [(t["id"], t["order"]) for t in data["data"]] == [("t-graphs", 0), ("t-arrays", 1)]

    @pytest.mark.asyncio
    async def test__move_out_of_range__returns_422(self, client, store: SheetStore) -> None:
        test_client = await client
        response = await test_client.post("/api/topics/t-graphs/move", json={"index": 5})

        assert response.status == 422
        assert (await response.json())["success"] is False
        assert [t.id for t in store.get().topics] == ["t-arrays", "t-graphs"]

    @pytest.mark.asyncio
    async def test__move_without_index__returns_400(self, client) -> None:
        test_client = await client
        response = await test_client.post("/api/topics/t-graphs/move", json={"index": "0"})

        assert response.status == 400
        assert (await response.json())["message"] == "index must be an integer"


class TestSubTopicEndpoints:
    """Tests for /api/topics/{tid}/subtopics."""

    @pytest.mark.asyncio
    async def test__add__returns_201(self, client) -> None:
        test_client = await client
        response = await test_client.post(
            "/api/topics/t-graphs/subtopics", json={"title": "DFS"}
        )

        assert response.status == 201
        data = await response.json()
        assert data["data"]["title"] == "DFS"
        assert data["data"]["order"] == 1
        assert data["data"]["questions"] == []

    @pytest.mark.asyncio
    async def test__add_to_missing_topic__returns_404(self, client) -> None:
        test_client = await client
        response = await test_client.post("/api/topics/nope/subtopics", json={"title": "X"})

        assert response.status == 404
        assert (await response.json())["message"] == "Topic not found"

    @pytest.mark.asyncio
    async def test__rename_in_wrong_topic__returns_404(self, client) -> None:
        test_client = await client
        response = await test_client.put(
            "/api/topics/t-graphs/subtopics/s-easy", json={"title": "X"}
        )

        assert response.status == 404
        assert (await response.json())["message"] == "Sub-topic not found"

    @pytest.mark.asyncio
    async def test__delete__cascades(self, client, store: SheetStore) -> None:
        test_client = await client
        response = await test_client.delete("/api/topics/t-arrays/subtopics/s-easy")

        assert response.status == 200
        assert (await response.json())["message"] == "Sub-topic deleted"
        assert "q-a" not in store.get().all_ids()

    @pytest.mark.asyncio
    async def test__move(self, client) -> None:
        test_client = await client
        response = await test_client.post(
            "/api/topics/t-arrays/subtopics/s-medium/move", json={"index": 0}
        )

        assert response.status == 200
        data = await response.json()
        assert [st["id"] for st in data["data"]] == ["s-medium", "s-easy"]


class TestQuestionEndpoints:
    """Tests for /api/topics/{tid}/subtopics/{sid}/questions."""

    @pytest.mark.asyncio
    async def test__add__defaults_applied(self, client) -> None:
        test_client = await client
        response = await test_client.post(QUESTIONS, json={"title": "Two Sum"})

        assert response.status == 201
        question = (await response.json())["data"]
        assert question["difficulty"] == "Medium"
        assert question["status"] == "Not Started"
        assert question["link"] == ""
        assert question["order"] == 3

    @pytest.mark.asyncio
    async def test__add_without_title__returns_400(self, client) -> None:
        test_client = await client
        response = await test_client.post(QUESTIONS, json={"link": "https://x"})

        assert response.status == 400
        assert (await response.json())["message"] == "Question title is required"

    @pytest.mark.asyncio
    async def test__update_status__other_fields_kept(self, client) -> None:
        test_client = await client
        response = await test_client.put(QUESTIONS + "/q-a", json={"status": "Solved"})

        assert response.status == 200
        question = (await response.json())["data"]
        assert question["status"] == "Solved"
        assert question["title"] == "A"
        assert question["link"] == "https://a"

    @pytest.mark.asyncio
    async def test__update_empty_link__clears_link(self, client) -> None:
        test_client = await client
        response = await test_client.put(QUESTIONS + "/q-a", json={"link": ""})

        assert (await response.json())["data"]["link"] == ""

    @pytest.mark.asyncio
    async def test__update_in_wrong_subtopic__returns_404(self, client) -> None:
        test_client = await client
        response = await test_client.put(
            "/api/topics/t-arrays/subtopics/s-medium/questions/q-a", json={"title": "X"}
        )

        assert response.status == 404
        assert (await response.json())["message"] == "Question not found"

    @pytest.mark.asyncio
    async def test__delete__renumbers(self, client, store: SheetStore) -> None:
        test_client = await client
        response = await test_client.delete(QUESTIONS + "/q-b")

        assert response.status == 200
        assert (await response.json())["message"] == "Question deleted"
        questions = store.get().topics[0].sub_topics[0].questions
        assert [(q.id, q.order) for q in questions] == [("q-a", 0), ("q-c", 1)]

    @pytest.mark.asyncio
    async def test__delete_missing__returns_404(self, client) -> None:
        test_client = await client
        response = await test_client.delete(QUESTIONS + "/q-zzz")

        assert response.status == 404

    @pytest.mark.asyncio
    async def test__move(self, client) -> None:
        test_client = await client
        response = await test_client.post(QUESTIONS + "/q-a/move", json={"index": 2})

        assert response.status == 200
        data = await response.json()
        assert [q["id"] for q in data["data"]] == ["q-b", "q-c", "q-a"]
        assert [q["order"] for q in data["data"]] == [0, 1, 2]
