# File: src/mcp_zoekt_search/models/results.py
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

SymbolKind = Literal[
    "function", "class", "method", "variable", "interface",
    "type", "constant", "property", "unknown",
]

HealthState = Literal["healthy", "degraded", "unhealthy"]


class Symbol(BaseModel):
    name: str
    kind: SymbolKind
    file: str
    repository: str
    line: int
    column: int
    parent: Optional[str] = None
    parent_kind: Optional[SymbolKind] = None


class FileResult(BaseModel):
    file_name: str
    repository: str
    branches: List[str] = Field(default_factory=list)
    language: Optional[str] = None


class Reference(BaseModel):
    type: Literal["definition", "usage"]
    file: str
    repository: str
    line: int
    column: int
    context: str
    symbol: Optional[Symbol] = None

    @property
    def location_key(self) -> tuple[str, str, int]:
        return (self.repository, self.file, self.line)


class Branch(BaseModel):
    name: str
    version: Optional[str] = None


class Repository(BaseModel):
    name: str
    branches: List[Branch] = Field(default_factory=list)
    document_count: int = 0
    content_bytes: int = 0
    has_symbols: bool = False
    index_time: Optional[datetime] = None


class IndexStats(BaseModel):
    repository_count: int = 0
    document_count: int = 0
    shard_count: int = 0
    index_bytes: int = 0
    content_bytes: int = 0


class HealthCheck(BaseModel):
    healthy: bool
    error: Optional[str] = None


class HealthStatus(BaseModel):
    status: HealthState
    server_version: str
    zoekt_reachable: bool
    index_stats: Optional[IndexStats] = None
    error_message: Optional[str] = None
