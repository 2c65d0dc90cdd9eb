# File: src/mcp_zoekt_search/zoekt/client.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..errors import ErrorCode, ZoektError
from ..models.results import HealthCheck, IndexStats
from ..models.zoekt import RepoListEntry, SearchResult
from ..utils.logging import preview

log = logging.getLogger("mcp.zoekt.client")


class ZoektClient:
    """
    Async client for the zoekt-webserver JSON API.

    Each call is single shot (no retries). Faults come back as ZoektError with a
    code the classifier can tell apart: TIMEOUT for an expired deadline,
    UNAVAILABLE for any other transport failure, QUERY_ERROR for a non-2xx
    answer, NOT_FOUND for a missing file.
    """

    def __init__(
        self,
        base_url: str,
        timeout_ms: int = 30000,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_ms = timeout_ms
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_ms / 1000.0),
            transport=self._transport,
        )

    def _unavailable(self) -> ZoektError:
        return ZoektError(
            f"Search backend unavailable at {self.base_url}. Ensure zoekt-webserver is running.",
            ErrorCode.UNAVAILABLE,
        )

    def _timed_out(self) -> ZoektError:
        return ZoektError(
            f"Search timed out after {self.timeout_ms}ms. Try a more specific query.",
            ErrorCode.TIMEOUT,
        )

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            async with self._client() as client:
                return await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            log.warning("zoekt.timeout", extra={"url": url, "timeout_ms": self.timeout_ms})
            raise self._timed_out() from e
        except httpx.TransportError as e:
            log.warning("zoekt.unreachable", extra={"url": url, "error": preview(e)})
            raise self._unavailable() from e

    @staticmethod
    def _json(resp: httpx.Response) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError as e:
            raise ZoektError(f"Backend did not return valid JSON: {e}", ErrorCode.QUERY_ERROR, resp.status_code) from e
        if not isinstance(data, dict):
            raise ZoektError("Backend returned an unexpected JSON payload", ErrorCode.QUERY_ERROR, resp.status_code)
        return data

    async def search(
        self,
        query: str,
        limit: int = 30,
        context_lines: int = 3,
        chunk_matches: bool = False,
    ) -> SearchResult:
        """POST /api/search; `limit` caps the number of file matches returned."""
        body = {
            "Q": query,
            "Opts": {
                "NumContextLines": context_lines,
                "MaxDocDisplayCount": limit,
                "ChunkMatches": chunk_matches,
            },
        }
        resp = await self._send("POST", "/api/search", json=body)
        if resp.is_error:
            raise ZoektError(
                f"Query error: {resp.text or resp.reason_phrase}",
                ErrorCode.QUERY_ERROR,
                resp.status_code,
            )
        return SearchResult.from_api(self._json(resp))

    async def list_repos(self) -> List[RepoListEntry]:
        resp = await self._send("POST", "/api/list", json={"Q": ""})
        if resp.is_error:
            raise ZoektError(
                f"Failed to list repositories: {resp.text or resp.reason_phrase}",
                ErrorCode.QUERY_ERROR,
                resp.status_code,
            )
        return RepoListEntry.list_from_api(self._json(resp))

    async def get_file_content(self, repository: str, path: str, branch: str = "HEAD") -> str:
        params = {"r": repository, "f": path, "b": branch, "format": "raw"}
        resp = await self._send("GET", "/print", params=params)
        if resp.status_code == 404:
            raise ZoektError(f"File not found: {repository}/{path}", ErrorCode.NOT_FOUND, 404)
        if resp.is_error:
            raise ZoektError(
                f"Failed to get file content: {resp.text or resp.reason_phrase}",
                ErrorCode.QUERY_ERROR,
                resp.status_code,
            )
        return resp.text

    async def check_health(self) -> HealthCheck:
        """GET /healthz. Reports instead of raising."""
        try:
            resp = await self._send("GET", "/healthz")
        except ZoektError as e:
            return HealthCheck(healthy=False, error=e.message)
        if resp.is_error:
            return HealthCheck(healthy=False, error=resp.text or resp.reason_phrase)
        try:
            resp.json()
        except ValueError as e:
            return HealthCheck(healthy=False, error=f"Invalid health response: {e}")
        return HealthCheck(healthy=True)

    async def get_stats(self) -> IndexStats:
        entries = await self.list_repos()
        stats = IndexStats(repository_count=len(entries))
        for e in entries:
            stats.document_count += e.stats.documents
            stats.shard_count += e.stats.shards
            stats.index_bytes += e.stats.index_bytes
            stats.content_bytes += e.stats.content_bytes
        return stats
