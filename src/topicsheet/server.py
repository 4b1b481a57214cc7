"""aiohttp server for Topicsheet.

Application factory and route registration.
"""

import logging

from aiohttp import web

from topicsheet.api.envelope import error_middleware
from topicsheet.api.sheet import create_sheet_routes
from topicsheet.api.topics import create_topic_routes
from topicsheet.app_keys import config_key, service_key
from topicsheet.config import Config
from topicsheet.core.service import SheetService
from topicsheet.core.store import SheetStore
from topicsheet.seed import load_sheet

logger = logging.getLogger(__name__)


def create_app(config: Config, store: SheetStore | None = None) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        store: Pre-built store; when omitted one is seeded from
            ``config.sheet.seed_path``

    Returns:
        Configured aiohttp application
    """
    app = web.Application(middlewares=[error_middleware])

    if store is None:
        store = SheetStore(load_sheet(config.sheet.seed_path))

    app[service_key] = SheetService(store, strict=config.sheet.strict_replace)
    app[config_key] = config

    app.router.add_routes(create_sheet_routes())
    app.router.add_routes(create_topic_routes())

    return app


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    logger.info(f"Serving on {config.server.host}:{config.server.port}")
    web.run_app(app, host=config.server.host, port=config.server.port, print=None)
