# File: src/mcp_zoekt_search/tools/list_repos.py
from __future__ import annotations

import logging
import re
from typing import Any, List, Optional, Sequence

from mcp.types import CallToolResult

from ..formatting import format_bytes_compact, format_number
from ..models.params import ListReposParams
from ..models.results import Branch, Repository
from ..models.zoekt import RepoListEntry
from ..settings import Settings
from ..zoekt.client import ZoektClient
from .base import run_tool, to_result

log = logging.getLogger("mcp.zoekt.tools.repos")


def to_repository(entry: RepoListEntry) -> Repository:
    info = entry.repository
    return Repository(
        name=info.name,
        branches=[Branch(name=b.name, version=b.version or None) for b in info.branches],
        document_count=entry.stats.documents,
        content_bytes=entry.stats.content_bytes,
        has_symbols=info.has_symbols,
        index_time=entry.index_metadata.index_time,
    )


def filter_repositories(repos: Sequence[Repository], pattern: Optional[str]) -> List[Repository]:
    """Case-insensitive regex match on the repository name; re.error propagates."""
    if not pattern:
        return list(repos)
    rx = re.compile(pattern, re.IGNORECASE)
    return [r for r in repos if rx.search(r.name)]


def format_repo_list(repos: Sequence[Repository], pattern: Optional[str]) -> str:
    out = "## Indexed Repositories\n\n"
    if not repos:
        if pattern:
            return out + f"No repositories found matching '{pattern}'.\n"
        return out + "No repositories are currently indexed.\n"

    matching = f" matching '{pattern}'" if pattern else ""
    out += f"Found {len(repos)} repositories{matching}:\n\n"
    for i, repo in enumerate(repos, start=1):
        out += (
            f"{i}. **{repo.name}** ({format_number(repo.document_count)} files, "
            f"{format_bytes_compact(repo.content_bytes)})\n"
        )
        if repo.branches:
            names = ", ".join(
                f"{b.name}@{b.version[:7]}" if b.version else b.name for b in repo.branches
            )
            out += f"   Branches: {names}\n"
        symbols = "✅" if repo.has_symbols else "❌"
        indexed = repo.index_time.strftime("%Y-%m-%d") if repo.index_time else "unknown"
        out += f"   Symbols: {symbols} | Indexed: {indexed}\n\n"

    return out + f"Total: {len(repos)} repositories\n"


async def list_repos(client: ZoektClient, *, filter: Optional[str] = None) -> str:
    async def body() -> str:
        params = ListReposParams(filter=filter)
        entries = await client.list_repos()
        repos = filter_repositories([to_repository(e) for e in entries], params.filter)
        log.debug("list_repos.page", extra={"total": len(entries), "matched": len(repos)})
        return format_repo_list(repos, params.filter)

    return await run_tool("list_repos", {"filter": filter}, body)


def register_list_repos(mcp: Any, client: ZoektClient, settings: Settings) -> None:
    @mcp.tool(
        name="list_repos",
        description="List indexed repositories with branch, size and symbol information. "
                    "Optional `filter` is a case-insensitive regex on the repository name.",
    )
    async def list_repos_tool(filter: Optional[str] = None) -> CallToolResult:
        return await to_result(list_repos(client, filter=filter))
