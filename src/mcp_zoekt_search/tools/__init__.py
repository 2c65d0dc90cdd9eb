# File: src/mcp_zoekt_search/tools/__init__.py
from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from ..settings import Settings
from ..zoekt.client import ZoektClient
from .file_content import register_file_content
from .find_references import register_find_references
from .get_health import register_get_health
from .list_repos import register_list_repos
from .search import register_search
from .search_files import register_search_files
from .search_symbols import register_search_symbols


def register(mcp: FastMCP, client: ZoektClient, settings: Settings) -> None:
    register_search(mcp, client, settings)
    register_search_symbols(mcp, client, settings)
    register_search_files(mcp, client, settings)
    register_find_references(mcp, client, settings)
    register_list_repos(mcp, client, settings)
    register_file_content(mcp, client, settings)
    register_get_health(mcp, client, settings)
