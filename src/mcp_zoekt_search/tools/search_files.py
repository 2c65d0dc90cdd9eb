# File: src/mcp_zoekt_search/tools/search_files.py
from __future__ import annotations

import logging
import time
from typing import Any, List, Optional, Sequence

from mcp.types import CallToolResult

from ..formatting import group_by, more_results_footer
from ..models.params import FileSearchParams, Limit, PageCursor
from ..models.results import FileResult
from ..models.zoekt import FileMatch
from ..pagination import Page, paginate
from ..settings import Settings
from ..zoekt.client import ZoektClient
from .base import elapsed_ms, run_tool, to_result

log = logging.getLogger("mcp.zoekt.tools.files")


def wrap_filename_query(query: str) -> str:
    """'package.json' -> 'type:filename package.json'; explicit type:file(name) is kept."""
    q = query.strip()
    if q.startswith("type:filename") or q.startswith("type:file"):
        return q
    return f"type:filename {q}"


def extract_files(file_matches: Sequence[FileMatch]) -> List[FileResult]:
    return [
        FileResult(
            file_name=fm.file_name,
            repository=fm.repository_name,
            branches=list(fm.branches),
            language=fm.language or None,
        )
        for fm in file_matches
    ]


def format_file_results(query: str, page: Page[FileResult], duration_ms: int) -> str:
    out = f"## File Search Results: `{query}`\n\n"
    if not page.items:
        return out + "No files found matching your query.\n"

    out += f"Found {len(page.items)} files ({duration_ms}ms)\n\n"
    for repo, files in group_by(page.items, lambda f: f.repository).items():
        out += f"### {repo}\n\n"
        for f in files:
            lang = f" ({f.language})" if f.language else ""
            branch = f" [{f.branches[0]}]" if f.branches else ""
            out += f"- 📄 `{f.file_name}`{lang}{branch}\n"
        out += "\n"
    return out + more_results_footer(page.next_cursor)


async def search_files(
    client: ZoektClient,
    *,
    query: str,
    limit: int = 30,
    cursor: Optional[str] = None,
) -> str:
    async def body() -> str:
        params = FileSearchParams(query=query, limit=limit, cursor=cursor)
        wrapped = wrap_filename_query(params.query)
        started = time.perf_counter()

        async def fetch(q: str, count: int) -> List[FileResult]:
            # filename matches carry no content worth showing
            result = await client.search(q, limit=count, context_lines=0)
            return extract_files(result.file_matches)

        page = await paginate(wrapped, params.limit, params.cursor, fetch)
        log.debug("search_files.page", extra={"query": wrapped, "items": len(page.items), "has_more": page.has_more})
        return format_file_results(params.query, page, elapsed_ms(started))

    return await run_tool("search_files", {"query": query, "limit": limit, "cursor": cursor}, body)


def register_search_files(mcp: Any, client: ZoektClient, settings: Settings) -> None:
    @mcp.tool(
        name="search_files",
        description="Find files by name or path pattern across repositories (type:filename search). "
                    "Returns file metadata only, no content.",
    )
    async def search_files_tool(
        query: str,
        limit: Limit = settings.DEFAULT_LIMIT,
        cursor: PageCursor = None,
    ) -> CallToolResult:
        return await to_result(search_files(client, query=query, limit=limit, cursor=cursor))
