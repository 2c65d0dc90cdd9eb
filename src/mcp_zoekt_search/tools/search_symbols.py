# File: src/mcp_zoekt_search/tools/search_symbols.py
"""
search_symbols: symbol names (functions, classes, methods, ...) indexed by
ctags, found through Zoekt's `sym:` atom.
"""
from __future__ import annotations

import logging
import time
from typing import Any, List, Optional, Sequence

from mcp.types import CallToolResult

from ..formatting import group_by, more_results_footer
from ..models.params import ContextLines, Limit, PageCursor, SearchParams
from ..models.results import Symbol, SymbolKind
from ..models.zoekt import ChunkMatch, FileMatch
from ..pagination import Page, paginate
from ..settings import Settings
from ..zoekt.client import ZoektClient
from .base import elapsed_ms, run_tool, to_result

log = logging.getLogger("mcp.zoekt.tools.symbols")

# filter atoms that must stay outside the sym: term
QUERY_OPERATORS = (
    "lang:", "language:",
    "repo:", "r:",
    "file:", "f:",
    "branch:", "b:",
    "case:", "c:",
    "content:",
    "sym:", "type:",
    "archived:",
)

_KINDS: dict[str, SymbolKind] = {
    "function": "function", "func": "function", "def": "function",
    "class": "class",
    "method": "method", "member": "method",
    "variable": "variable", "var": "variable", "let": "variable", "const": "variable",
    "interface": "interface",
    "type": "type", "typedef": "type", "typealias": "type",
    "constant": "constant", "enum": "constant", "enumerator": "constant",
    "property": "property", "field": "property",
}


def wrap_symbol_query(query: str) -> str:
    """
    'handleRequest'            -> 'sym:handleRequest'
    'handler lang:typescript'  -> 'sym:handler lang:typescript'
    'sym:handler'              -> 'sym:handler'
    """
    q = query.strip()
    if q.startswith("sym:"):
        return q

    terms: List[str] = []
    filters: List[str] = []
    for token in q.split():
        if token.lower().startswith(QUERY_OPERATORS):
            filters.append(token)
        else:
            terms.append(token)

    if not terms:
        return f"sym:{q}"
    sym_query = f"sym:{' '.join(terms)}"
    return f"{sym_query} {' '.join(filters)}" if filters else sym_query


def normalize_kind(kind: str) -> SymbolKind:
    return _KINDS.get((kind or "").lower(), "unknown")


def chunk_symbols(fm: FileMatch, chunk: ChunkMatch) -> List[Symbol]:
    """SymbolInfo entries are aligned index-for-index with the chunk's Ranges."""
    symbols: List[Symbol] = []
    for i, info in enumerate(chunk.symbol_info):
        if info is None:
            continue
        rng = chunk.ranges[i] if i < len(chunk.ranges) else None
        pos = rng.start if rng is not None else chunk.content_start
        symbols.append(
            Symbol(
                name=info.sym,
                kind=normalize_kind(info.kind),
                file=fm.file_name,
                repository=fm.repository_name,
                line=pos.line_number,
                column=pos.column,
                parent=info.parent or None,
                parent_kind=normalize_kind(info.parent_kind) if info.parent else None,
            )
        )
    return symbols


def extract_symbols(file_matches: Sequence[FileMatch]) -> List[Symbol]:
    return [s for fm in file_matches for chunk in fm.chunk_matches for s in chunk_symbols(fm, chunk)]


def format_symbol_results(query: str, page: Page[Symbol], file_count: int, duration_ms: int) -> str:
    out = f"## Symbol Search Results: `{query}`\n\n"
    if not page.items:
        return out + "No symbols found matching your query.\n"

    out += f"Found {len(page.items)} symbols in {file_count} files ({duration_ms}ms)\n\n"
    for repo, symbols in group_by(page.items, lambda s: s.repository).items():
        out += f"### {repo}\n\n"
        for sym in symbols:
            parent = f" (in {sym.parent_kind or 'unknown'} `{sym.parent}`)" if sym.parent else ""
            out += f"- **{sym.kind}** `{sym.name}`{parent}\n"
            out += f"  📁 {sym.file}:{sym.line}:{sym.column}\n"
        out += "\n"
    return out + more_results_footer(page.next_cursor)


async def search_symbols(
    client: ZoektClient,
    *,
    query: str,
    limit: int = 30,
    context_lines: int = 3,
    cursor: Optional[str] = None,
) -> str:
    async def body() -> str:
        params = SearchParams(query=query, limit=limit, context_lines=context_lines, cursor=cursor)
        wrapped = wrap_symbol_query(params.query)
        started = time.perf_counter()
        file_count = 0

        async def fetch(q: str, count: int) -> List[Symbol]:
            nonlocal file_count
            result = await client.search(q, limit=count, context_lines=params.context_lines, chunk_matches=True)
            file_count = result.stats.file_count if result.stats else len(result.file_matches)
            return extract_symbols(result.file_matches)

        page = await paginate(wrapped, params.limit, params.cursor, fetch)
        log.debug("search_symbols.page", extra={"query": wrapped, "items": len(page.items), "has_more": page.has_more})
        return format_symbol_results(params.query, page, file_count, elapsed_ms(started))

    return await run_tool("search_symbols", {"query": query, "limit": limit, "cursor": cursor}, body)


def register_search_symbols(mcp: Any, client: ZoektClient, settings: Settings) -> None:
    @mcp.tool(
        name="search_symbols",
        description="Search for symbol names (functions, classes, methods, variables) across repositories. "
                    "Plain terms are wrapped in sym:; filters such as lang: or repo: are kept as given.",
    )
    async def search_symbols_tool(
        query: str,
        limit: Limit = settings.DEFAULT_LIMIT,
        context_lines: ContextLines = settings.DEFAULT_CONTEXT_LINES,
        cursor: PageCursor = None,
    ) -> CallToolResult:
        return await to_result(search_symbols(client, query=query, limit=limit, context_lines=context_lines, cursor=cursor))
