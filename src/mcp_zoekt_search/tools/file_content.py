# File: src/mcp_zoekt_search/tools/file_content.py
from __future__ import annotations

from typing import Any

from mcp.types import CallToolResult

from ..formatting import detect_language
from ..models.params import FileContentParams
from ..settings import Settings
from ..zoekt.client import ZoektClient
from .base import run_tool, to_result


def format_file_content(repository: str, path: str, branch: str, content: str) -> str:
    lang = detect_language(path)
    if not content.endswith("\n"):
        content += "\n"
    return f"## {repository}/{path}\n\nBranch: {branch}\n\n```{lang}\n{content}```\n"


async def file_content(client: ZoektClient, *, repository: str, path: str, branch: str = "HEAD") -> str:
    async def body() -> str:
        params = FileContentParams(repository=repository, path=path, branch=branch)
        content = await client.get_file_content(params.repository, params.path, params.branch)
        return format_file_content(params.repository, params.path, params.branch, content)

    return await run_tool("file_content", {"repository": repository, "path": path, "branch": branch}, body)


def register_file_content(mcp: Any, client: ZoektClient, settings: Settings) -> None:
    @mcp.tool(
        name="file_content",
        description="Fetch the full content of one indexed file. "
                    "`repository` and `path` as shown in search results; `branch` defaults to HEAD.",
    )
    async def file_content_tool(repository: str, path: str, branch: str = "HEAD") -> CallToolResult:
        return await to_result(file_content(client, repository=repository, path=path, branch=branch))
