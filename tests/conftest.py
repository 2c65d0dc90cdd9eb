"""Shared fixtures: an in-process fake zoekt-webserver behind httpx.MockTransport."""

from __future__ import annotations

import base64
import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from mcp_zoekt_search.zoekt.client import ZoektClient

BASE_URL = "http://zoekt.test:6070"


def b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def chunk(
    content: str,
    line: int,
    *,
    column: int = 1,
    symbols: Optional[List[Optional[Dict[str, Any]]]] = None,
    file_name: bool = False,
) -> Dict[str, Any]:
    start = {"ByteOffset": 0, "LineNumber": line, "Column": column}
    return {
        "Content": b64(content),
        "ContentStart": start,
        "Ranges": [{"Start": start, "End": {**start, "Column": column + 5}}],
        "FileName": file_name,
        "SymbolInfo": symbols,
    }


def file_match(
    repo: str,
    name: str,
    *,
    language: str = "Go",
    branches: Optional[List[str]] = None,
    chunks: Optional[List[Dict[str, Any]]] = None,
    lines: Optional[List[Tuple[int, str]]] = None,
) -> Dict[str, Any]:
    return {
        "Repository": repo,
        "FileName": name,
        "Branches": branches if branches is not None else ["main"],
        "Language": language,
        "ChunkMatches": chunks,
        "LineMatches": [
            {"Line": b64(text), "LineNumber": n, "LineStart": 0, "LineEnd": len(text), "FileName": False}
            for n, text in (lines or [])
        ] or None,
    }


def repo_entry(
    name: str,
    *,
    documents: int = 10,
    content_bytes: int = 2048,
    index_bytes: int = 4096,
    shards: int = 1,
    branches: Optional[List[Tuple[str, str]]] = None,
    has_symbols: bool = True,
    index_time: str = "2024-03-01T12:00:00Z",
) -> Dict[str, Any]:
    return {
        "Repository": {
            "Name": name,
            "Branches": [{"Name": b, "Version": v} for b, v in (branches or [("main", "0123456789abcdef")])],
            "HasSymbols": has_symbols,
        },
        "IndexMetadata": {"IndexTime": index_time},
        "Stats": {
            "Shards": shards,
            "Documents": documents,
            "IndexBytes": index_bytes,
            "ContentBytes": content_bytes,
        },
    }


class FakeZoekt:
    """
    Canned zoekt-webserver. Search results are keyed by the exact query string;
    MaxDocDisplayCount is honoured so paging behaves like the real server.
    """

    def __init__(self) -> None:
        self.results: Dict[str, List[Dict[str, Any]]] = {}
        self.repos: List[Dict[str, Any]] = []
        self.files: Dict[Tuple[str, str, str], str] = {}
        self.healthy = True
        self.search_error: Optional[Tuple[int, str]] = None
        self.requests: List[httpx.Request] = []

    def search_bodies(self) -> List[Dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.url.path == "/api/search"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/api/search":
            if self.search_error is not None:
                status, text = self.search_error
                return httpx.Response(status, text=text)
            body = json.loads(request.content)
            matches = self.results.get(body["Q"], [])
            shown = matches[: body["Opts"]["MaxDocDisplayCount"]]
            return httpx.Response(
                200,
                json={
                    "Result": {
                        "FileMatches": shown or None,
                        "Stats": {
                            "MatchCount": len(matches),
                            "FileCount": len(matches),
                            "Duration": 12_000_000,
                        },
                    }
                },
            )

        if path == "/api/list":
            return httpx.Response(200, json={"List": {"Repos": self.repos or None}})

        if path == "/print":
            p = request.url.params
            key = (p.get("r"), p.get("f"), p.get("b"))
            if key not in self.files:
                return httpx.Response(404, text="not found")
            return httpx.Response(200, text=self.files[key])

        if path == "/healthz":
            if not self.healthy:
                return httpx.Response(503, text="index loading")
            return httpx.Response(200, json={"ok": True})

        return httpx.Response(404, text="no route")


@pytest.fixture
def fake() -> FakeZoekt:
    return FakeZoekt()


@pytest.fixture
def client(fake: FakeZoekt) -> ZoektClient:
    return ZoektClient(BASE_URL, timeout_ms=5000, transport=httpx.MockTransport(fake.handler))


def failing_client(exc: Exception) -> ZoektClient:
    """Client whose every request raises `exc` at the transport."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise exc

    return ZoektClient(BASE_URL, timeout_ms=250, transport=httpx.MockTransport(handler))
