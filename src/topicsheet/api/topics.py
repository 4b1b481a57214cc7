"""Topic, sub-topic and question API endpoints.

Routes
------
- ``POST   /api/topics``                                   Add topic
- ``PUT    /api/topics/{tid}``                             Rename topic
- ``DELETE /api/topics/{tid}``                             Delete topic (cascade)
- ``POST   /api/topics/{tid}/move``                        Move topic
- ``POST   /api/topics/{tid}/subtopics``                   Add sub-topic
- ``PUT    /api/topics/{tid}/subtopics/{sid}``             Rename sub-topic
- ``DELETE /api/topics/{tid}/subtopics/{sid}``             Delete sub-topic (cascade)
- ``POST   /api/topics/{tid}/subtopics/{sid}/move``        Move sub-topic
- ``POST   /api/topics/{tid}/subtopics/{sid}/questions``   Add question
- ``PUT    /api/topics/{tid}/subtopics/{sid}/questions/{qid}``      Update question
- ``DELETE /api/topics/{tid}/subtopics/{sid}/questions/{qid}``      Delete question
- ``POST   /api/topics/{tid}/subtopics/{sid}/questions/{qid}/move`` Move question
"""

from aiohttp import web

from topicsheet.api.envelope import ok, read_index, read_json
from topicsheet.app_keys import service_key

TOPIC = "/api/topics/{topic_id}"
SUB_TOPIC = TOPIC + "/subtopics/{subtopic_id}"
QUESTION = SUB_TOPIC + "/questions/{question_id}"


def create_topic_routes() -> list[web.RouteDef]:
    return [
        web.post("/api/topics", add_topic),
        web.put(TOPIC, rename_topic),
        web.delete(TOPIC, delete_topic),
        web.post(TOPIC + "/move", move_topic),
        web.post(TOPIC + "/subtopics", add_subtopic),
        web.put(SUB_TOPIC, rename_subtopic),
        web.delete(SUB_TOPIC, delete_subtopic),
        web.post(SUB_TOPIC + "/move", move_subtopic),
        web.post(SUB_TOPIC + "/questions", add_question),
        web.put(QUESTION, update_question),
        web.delete(QUESTION, delete_question),
        web.post(QUESTION + "/move", move_question),
    ]


async def add_topic(request: web.Request) -> web.Response:
    body = await read_json(request)
    topic = request.app[service_key].add_topic(body.get("title"))
    return ok(topic.to_dict(), status=201)


async def rename_topic(request: web.Request) -> web.Response:
    body = await read_json(request)
    topic = request.app[service_key].rename_topic(
        request.match_info["topic_id"],
        body.get("title"),
    )
    return ok(topic.to_dict())


async def delete_topic(request: web.Request) -> web.Response:
    request.app[service_key].delete_topic(request.match_info["topic_id"])
    return ok(message="Topic deleted")


async def move_topic(request: web.Request) -> web.Response:
    body = await read_json(request)
    topics = request.app[service_key].move_topic(
        request.match_info["topic_id"],
        read_index(body),
    )
    return ok([topic.to_dict() for topic in topics])


async def add_subtopic(request: web.Request) -> web.Response:
    body = await read_json(request)
    sub_topic = request.app[service_key].add_subtopic(
        request.match_info["topic_id"],
        body.get("title"),
    )
    return ok(sub_topic.to_dict(), status=201)


async def rename_subtopic(request: web.Request) -> web.Response:
    body = await read_json(request)
    sub_topic = request.app[service_key].rename_subtopic(
        request.match_info["topic_id"],
        request.match_info["subtopic_id"],
        body.get("title"),
    )
    return ok(sub_topic.to_dict())


async def delete_subtopic(request: web.Request) -> web.Response:
    request.app[service_key].delete_subtopic(
        request.match_info["topic_id"],
        request.match_info["subtopic_id"],
    )
    return ok(message="Sub-topic deleted")


async def move_subtopic(request: web.Request) -> web.Response:
    body = await read_json(request)
    sub_topics = request.app[service_key].move_subtopic(
        request.match_info["topic_id"],
        request.match_info["subtopic_id"],
        read_index(body),
    )
    return ok([sub_topic.to_dict() for sub_topic in sub_topics])


async def add_question(request: web.Request) -> web.Response:
    body = await read_json(request)
    question = request.app[service_key].add_question(
        request.match_info["topic_id"],
        request.match_info["subtopic_id"],
        body,
    )
    return ok(question.to_dict(), status=201)


async def update_question(request: web.Request) -> web.Response:
    body = await read_json(request)
    question = request.app[service_key].update_question(
        request.match_info["topic_id"],
        request.match_info["subtopic_id"],
        request.match_info["question_id"],
        body,
    )
    return ok(question.to_dict())


async def delete_question(request: web.Request) -> web.Response:
    request.app[service_key].delete_question(
        request.match_info["topic_id"],
        request.match_info["subtopic_id"],
        request.match_info["question_id"],
    )
    return ok(message="Question deleted")


async def move_question(request: web.Request) -> web.Response:
    body = await read_json(request)
    questions = request.app[service_key].move_question(
        request.match_info["topic_id"],
        request.match_info["subtopic_id"],
        request.match_info["question_id"],
        read_index(body),
    )
    return ok([question.to_dict() for question in questions])
