# File: src/mcp_zoekt_search/tools/search.py
from __future__ import annotations

import logging
from typing import Any, List, Optional

from mcp.types import CallToolResult

from ..formatting import more_results_footer
from ..models.params import ContextLines, Limit, PageCursor, SearchParams
from ..models.zoekt import FileMatch, SearchStats
from ..pagination import Page, paginate
from ..settings import Settings
from ..zoekt.client import ZoektClient
from .base import run_tool, to_result

log = logging.getLogger("mcp.zoekt.tools.search")


def format_search_results(query: str, page: Page[FileMatch], stats: Optional[SearchStats]) -> str:
    out = f"## Results for: `{query}`\n\n"
    if not page.items:
        return out + "No matches found.\n"

    for match in page.items:
        lang = match.language or "Unknown"
        branch = match.branches[0] if match.branches else "HEAD"
        out += f"### {match.repository_name} - {match.file_name}\n"
        out += f"Language: {lang} | Branch: {branch}\n\n"

        if match.chunk_matches:
            for chunk in match.chunk_matches:
                text = chunk.text
                if not text.endswith("\n"):
                    text += "\n"
                out += f"```{match.language.lower()}\n{text}```\n"
                out += f"Line {chunk.content_start.line_number}\n\n"
        elif match.line_matches:
            for line in match.line_matches:
                out += f"Line {line.line_number}: {line.text.strip()}\n"
            out += "\n"

        out += "---\n\n"

    if stats is not None:
        out += (
            f"Stats: {stats.match_count} matches in {stats.file_count} files "
            f"({stats.duration_ns / 1_000_000:.0f}ms)\n"
        )
    out += f"Showing files {page.offset + 1}-{page.offset + len(page.items)}\n"

    footer = more_results_footer(page.next_cursor)
    if footer:
        out += "\n" + footer
    return out


async def search_code(
    client: ZoektClient,
    *,
    query: str,
    limit: int = 30,
    context_lines: int = 3,
    cursor: Optional[str] = None,
) -> str:
    async def body() -> str:
        params = SearchParams(query=query, limit=limit, context_lines=context_lines, cursor=cursor)
        stats: Optional[SearchStats] = None

        async def fetch(q: str, count: int) -> List[FileMatch]:
            nonlocal stats
            result = await client.search(q, limit=count, context_lines=params.context_lines)
            stats = result.stats
            return result.file_matches

        page = await paginate(params.query, params.limit, params.cursor, fetch)
        log.debug("search.page", extra={"items": len(page.items), "has_more": page.has_more})
        return format_search_results(params.query, page, stats)

    return await run_tool("search", {"query": query, "limit": limit, "cursor": cursor}, body)


def register_search(mcp: Any, client: ZoektClient, settings: Settings) -> None:
    @mcp.tool(
        name="search",
        description="Search code across indexed repositories using Zoekt query syntax. "
                    "Supports regex, file filters (file:, lang:), repo filters (repo:), "
                    "symbol search (sym:) and boolean operators (and, or, not). "
                    "Pass nextCursor back as `cursor` to get the next page.",
    )
    async def search(
        query: str,
        limit: Limit = settings.DEFAULT_LIMIT,
        context_lines: ContextLines = settings.DEFAULT_CONTEXT_LINES,
        cursor: PageCursor = None,
    ) -> CallToolResult:
        return await to_result(search_code(client, query=query, limit=limit, context_lines=context_lines, cursor=cursor))
