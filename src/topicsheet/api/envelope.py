"""Response envelope and error mapping shared by all API endpoints.

Every response is ``{"success": true, "data": ...}`` or
``{"success": false, "message": "..."}``.
"""

import logging
from collections.abc import Awaitable, Callable
from json import JSONDecodeError
from typing import Any

from aiohttp import web

from topicsheet.core.errors import (
    InvalidInputError,
    NotFoundError,
    OutOfRangeError,
    SheetError,
)

logger = logging.getLogger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

_STATUS_BY_ERROR: dict[type[SheetError], int] = {
    NotFoundError: 404,
    OutOfRangeError: 422,
    InvalidInputError: 400,
}


def ok(data: Any = None, *, message: str | None = None, status: int = 200) -> web.Response:
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    return web.json_response(body, status=status)


def fail(message: str, status: int) -> web.Response:
    return web.json_response({"success": False, "message": message}, status=status)


async def read_json(request: web.Request) -> dict[str, Any]:
    """Parse the request body as a JSON object.

    Raises:
        InvalidInputError: If the body is not a JSON object
    """
    try:
        body = await request.json()
    except JSONDecodeError as e:
        raise InvalidInputError(f"Malformed JSON body: {e.msg}") from e
    except UnicodeDecodeError as e:
        raise InvalidInputError("Request body is not valid UTF-8") from e
    if not isinstance(body, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return body


def read_index(body: dict[str, Any]) -> int:
    """Extract the destination index of a move request."""
    index = body.get("index")
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidInputError("index must be an integer")
    return index


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Map sheet errors to failure envelopes.

    Only ``SheetError`` subclasses are translated; aiohttp's own HTTP
    exceptions and unexpected errors propagate unchanged.
    """
    try:
        return await handler(request)
    except SheetError as e:
        status = next(
            (code for cls, code in _STATUS_BY_ERROR.items() if isinstance(e, cls)),
            400,
        )
        logger.info(f"{request.method} {request.path} -> {status}: {e}")
        return fail(str(e), status)
