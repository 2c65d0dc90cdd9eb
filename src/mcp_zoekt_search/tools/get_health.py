# File: src/mcp_zoekt_search/tools/get_health.py
"""
get_health: reachability of the Zoekt backend plus aggregate index numbers.

Never returns an error result. An unreachable backend is reported as
"unhealthy"; a reachable backend whose stats cannot be read is "degraded".
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from mcp.types import CallToolResult

from .. import __version__
from ..formatting import format_bytes, format_number
from ..models.results import HealthCheck, HealthStatus, IndexStats
from ..settings import Settings
from ..utils.logging import preview
from ..zoekt.client import ZoektClient
from .base import to_result

log = logging.getLogger("mcp.zoekt.tools.health")

_BADGES = {"healthy": "✅ Healthy", "degraded": "⚠️ Degraded", "unhealthy": "❌ Unhealthy"}


def build_health_status(check: HealthCheck, stats: Optional[IndexStats], version: str = __version__) -> HealthStatus:
    if not check.healthy:
        return HealthStatus(
            status="unhealthy",
            server_version=version,
            zoekt_reachable=False,
            error_message=check.error,
        )
    if stats is None:
        return HealthStatus(
            status="degraded",
            server_version=version,
            zoekt_reachable=True,
            error_message="Index statistics unavailable",
        )
    return HealthStatus(status="healthy", server_version=version, zoekt_reachable=True, index_stats=stats)


def format_health_status(status: HealthStatus) -> str:
    out = "## Zoekt MCP Server Health\n\n"
    out += f"**Status**: {_BADGES[status.status]}\n\n"
    out += "| Component | Status |\n|---|---|\n"
    out += f"| MCP Server Version | {status.server_version} |\n"
    out += f"| Zoekt Backend | {'✅ Reachable' if status.zoekt_reachable else '❌ Unreachable'} |\n"

    stats = status.index_stats
    if stats is not None:
        out += f"| Repositories | {format_number(stats.repository_count)} |\n"
        out += f"| Documents | {format_number(stats.document_count)} |\n"
        out += f"| Shards | {format_number(stats.shard_count)} |\n"
        out += f"| Index Size | {format_bytes(stats.index_bytes)} |\n"
        out += f"| Content Size | {format_bytes(stats.content_bytes)} |\n"

    if status.error_message:
        out += f"\n### Error Details\n\n{status.error_message}\n"
    return out


async def get_health(client: ZoektClient, version: str = __version__) -> str:
    log.info("get_health.request")
    check = await client.check_health()
    stats: Optional[IndexStats] = None
    if check.healthy:
        try:
            stats = await client.get_stats()
        except Exception as e:
            # reported as degraded below
            log.warning("get_health.stats_failed", extra={"error": preview(e)})
    status = build_health_status(check, stats, version)
    log.info("get_health.complete", extra={"status": status.status})
    return format_health_status(status)


def register_get_health(mcp: Any, client: ZoektClient, settings: Settings) -> None:
    @mcp.tool(
        name="get_health",
        description="Report server version, Zoekt backend reachability and index statistics.",
    )
    async def get_health_tool() -> CallToolResult:
        return await to_result(get_health(client))
