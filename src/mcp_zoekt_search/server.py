# File: src/mcp_zoekt_search/server.py
from __future__ import annotations

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .settings import Settings
from .tools import register as register_tools
from .zoekt.client import ZoektClient

logger = logging.getLogger("mcp.zoekt.server")

INSTRUCTIONS = (
    "Code search over repositories indexed by Zoekt. Use `search` for content, "
    "`search_symbols` for definitions, `search_files` for paths and `find_references` "
    "for definitions plus usages. Paginated tools return a cursor that is only valid "
    "for the same query."
)


def create_server(settings: Optional[Settings] = None, client: Optional[ZoektClient] = None) -> FastMCP:
    settings = settings or Settings()
    client = client or ZoektClient(settings.ZOEKT_URL, settings.ZOEKT_TIMEOUT_MS)

    server = FastMCP(settings.MCP_SERVER_NAME, instructions=INSTRUCTIONS)
    register_tools(server, client, settings)
    logger.debug("server.created", extra={"zoekt_url": client.base_url, "timeout_ms": client.timeout_ms})
    return server


settings = Settings()

# module-level instance for `mcp dev` and the runner
mcp = create_server(settings)
