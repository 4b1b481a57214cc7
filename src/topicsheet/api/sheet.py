"""Sheet API endpoints.

Whole-sheet fetch, replace and reorder, plus progress statistics.
"""

from aiohttp import web

from topicsheet.api.envelope import ok, read_json
from topicsheet.app_keys import service_key
from topicsheet.core.errors import InvalidInputError
from topicsheet.core.model import Sheet, Topic
from topicsheet.core.stats import compute_stats


def create_sheet_routes() -> list[web.RouteDef]:
    return [
        web.get(
            "/api/question-tracker/v1/sheet/public/get-sheet-by-slug/{slug}",
            get_sheet_by_slug,
        ),
        web.get("/api/sheet", get_sheet),
        web.put("/api/sheet", replace_sheet),
        web.put("/api/sheet/reorder", reorder_sheet),
        web.get("/api/sheet/stats", get_stats),
    ]


async def get_sheet_by_slug(request: web.Request) -> web.Response:
    service = request.app[service_key]
    sheet = service.get_sheet(request.match_info["slug"])
    return ok(sheet.to_dict())


async def get_sheet(request: web.Request) -> web.Response:
    service = request.app[service_key]
    return ok(service.get_sheet().to_dict())


async def replace_sheet(request: web.Request) -> web.Response:
    service = request.app[service_key]
    body = await read_json(request)
    body.setdefault("id", service.get_sheet().id)
    sheet = service.replace_sheet(Sheet.from_dict(body))
    return ok(sheet.to_dict(), message="Sheet updated successfully")


async def reorder_sheet(request: web.Request) -> web.Response:
    service = request.app[service_key]
    body = await read_json(request)
    raw_topics = body.get("topics")
    if not isinstance(raw_topics, list):
        raise InvalidInputError("topics must be a list")
    topics = [Topic.from_dict(item, i) for i, item in enumerate(raw_topics)]
    sheet = service.reorder(topics)
    return ok(sheet.to_dict())


async def get_stats(request: web.Request) -> web.Response:
    service = request.app[service_key]
    return ok(compute_stats(service.get_sheet()).to_dict())
