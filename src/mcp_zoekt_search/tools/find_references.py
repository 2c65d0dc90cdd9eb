# File: src/mcp_zoekt_search/tools/find_references.py
"""
find_references: definitions (sym: search) plus usages (content search) of
one symbol. Usages sitting on a definition line are dropped, and the two
lists are paged as one sequence, definitions first.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, List, Optional, Sequence

from mcp.types import CallToolResult

from ..formatting import group_by, more_results_footer
from ..models.params import ContextLines, FindReferencesParams, Limit, PageCursor
from ..models.results import Reference
from ..models.zoekt import FileMatch
from ..pagination import Page, paginate
from ..settings import Settings
from ..zoekt.client import ZoektClient
from .base import elapsed_ms, run_tool, to_result
from .search_symbols import chunk_symbols

log = logging.getLogger("mcp.zoekt.tools.references")


def build_queries(symbol: str, filters: Optional[str]) -> tuple[str, str]:
    suffix = f" {filters}" if filters else ""
    return f"sym:{symbol}{suffix}", f"{symbol}{suffix}"


def extract_definitions(file_matches: Sequence[FileMatch]) -> List[Reference]:
    defs: List[Reference] = []
    for fm in file_matches:
        for chunk in fm.chunk_matches:
            context = chunk.text.strip()
            for sym in chunk_symbols(fm, chunk):
                defs.append(
                    Reference(
                        type="definition",
                        file=sym.file,
                        repository=sym.repository,
                        line=sym.line,
                        column=sym.column,
                        context=context,
                        symbol=sym,
                    )
                )
    return defs


def extract_usages(file_matches: Sequence[FileMatch]) -> List[Reference]:
    """Handles both ChunkMatches and legacy LineMatches; filename hits are skipped."""
    usages: List[Reference] = []
    for fm in file_matches:
        for chunk in fm.chunk_matches:
            if chunk.file_name:
                continue
            column = chunk.ranges[0].start.column if chunk.ranges else chunk.content_start.column
            usages.append(
                Reference(
                    type="usage",
                    file=fm.file_name,
                    repository=fm.repository_name,
                    line=chunk.content_start.line_number,
                    column=column,
                    context=chunk.text.strip(),
                )
            )
        for line in fm.line_matches:
            if line.file_name:
                continue
            usages.append(
                Reference(
                    type="usage",
                    file=fm.file_name,
                    repository=fm.repository_name,
                    line=line.line_number,
                    column=line.line_start,
                    context=line.text.strip(),
                )
            )
    return usages


def deduplicate_references(definitions: Sequence[Reference], usages: Sequence[Reference]) -> List[Reference]:
    seen = {d.location_key for d in definitions}
    return [u for u in usages if u.location_key not in seen]


def format_reference_results(symbol: str, page: Page[Reference], duration_ms: int) -> str:
    out = f"## References for: `{symbol}`\n\n"
    if not page.items:
        return out + "No references found matching your query.\n"

    defs = [r for r in page.items if r.type == "definition"]
    usages = [r for r in page.items if r.type == "usage"]
    out += f"Found {len(defs)} definition(s) and {len(usages)} usage(s) ({duration_ms}ms)\n\n"

    if defs:
        out += "### Definitions\n\n"
        for d in defs:
            kind = f" ({d.symbol.kind})" if d.symbol else ""
            out += f"- 📍 **{d.repository}** - `{d.file}:{d.line}`{kind}\n"
            out += f"  ```\n  {d.context}\n  ```\n\n"

    if usages:
        out += "### Usages\n\n"
        for repo, refs in group_by(usages, lambda r: r.repository).items():
            out += f"**{repo}**\n\n"
            for u in refs:
                out += f"- `{u.file}:{u.line}`\n"
                out += f"  ```\n  {u.context}\n  ```\n\n"

    return out + more_results_footer(page.next_cursor)


async def find_references(
    client: ZoektClient,
    *,
    symbol: str,
    filters: Optional[str] = None,
    limit: int = 30,
    context_lines: int = 3,
    cursor: Optional[str] = None,
) -> str:
    async def body() -> str:
        params = FindReferencesParams(
            symbol=symbol, filters=filters, limit=limit, context_lines=context_lines, cursor=cursor
        )
        def_query, usage_query = build_queries(params.symbol, params.filters)
        started = time.perf_counter()

        async def fetch(_: str, count: int) -> List[Reference]:
            def_result, usage_result = await asyncio.gather(
                client.search(def_query, limit=count, context_lines=params.context_lines, chunk_matches=True),
                # usages outnumber definitions
                client.search(usage_query, limit=count * 2, context_lines=params.context_lines, chunk_matches=True),
            )
            definitions = extract_definitions(def_result.file_matches)
            usages = deduplicate_references(definitions, extract_usages(usage_result.file_matches))
            return definitions + usages

        page = await paginate(f"{def_query}|{usage_query}", params.limit, params.cursor, fetch)
        log.debug("find_references.page", extra={"items": len(page.items), "has_more": page.has_more})
        return format_reference_results(params.symbol, page, elapsed_ms(started))

    return await run_tool(
        "find_references",
        {"symbol": symbol, "filters": filters, "limit": limit, "cursor": cursor},
        body,
    )


def register_find_references(mcp: Any, client: ZoektClient, settings: Settings) -> None:
    @mcp.tool(
        name="find_references",
        description="Find definitions and usages of a symbol across repositories. "
                    "Optional `filters` (e.g. 'lang:go repo:myorg/') narrow both searches.",
    )
    async def find_references_tool(
        symbol: str,
        filters: Optional[str] = None,
        limit: Limit = settings.DEFAULT_LIMIT,
        context_lines: ContextLines = settings.DEFAULT_CONTEXT_LINES,
        cursor: PageCursor = None,
    ) -> CallToolResult:
        return await to_result(
            find_references(
                client, symbol=symbol, filters=filters, limit=limit, context_lines=context_lines, cursor=cursor
            )
        )
