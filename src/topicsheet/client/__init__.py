"""HTTP client for the Topicsheet API.

This package provides the REST API client and the session that keeps a
local sheet in sync with the server.
"""

from .api import SheetApiError, SheetClient
from .session import SheetSession

__all__ = ['SheetApiError', 'SheetClient', 'SheetSession']
