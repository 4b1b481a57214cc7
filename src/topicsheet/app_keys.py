"""Application keys for type-safe app configuration access."""

from aiohttp import web

from topicsheet.config import Config
from topicsheet.core.service import SheetService

service_key = web.AppKey("service", SheetService)
config_key = web.AppKey("config", Config)
