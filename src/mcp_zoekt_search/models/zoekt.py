# File: src/mcp_zoekt_search/models/zoekt.py
from __future__ import annotations

import base64
import binascii
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Mirrors the zoekt-webserver JSON API. Go encodes nil slices as null and
# []byte as base64, hence the before-validators and decode helpers.


class _ZoektModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def _none_to_list(v: Any) -> Any:
    return [] if v is None else v


def decode_content(encoded: str) -> str:
    try:
        return base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, ValueError):
        return encoded


class ContentPosition(_ZoektModel):
    byte_offset: int = Field(0, alias="ByteOffset")
    line_number: int = Field(0, alias="LineNumber")
    column: int = Field(0, alias="Column")


class MatchRange(_ZoektModel):
    start: ContentPosition = Field(default_factory=ContentPosition, alias="Start")
    end: ContentPosition = Field(default_factory=ContentPosition, alias="End")


class SymbolInfo(_ZoektModel):
    sym: str = Field(alias="Sym")
    kind: str = Field("", alias="Kind")
    parent: str = Field("", alias="Parent")
    parent_kind: str = Field("", alias="ParentKind")


class ChunkMatch(_ZoektModel):
    content: str = Field("", alias="Content")
    content_start: ContentPosition = Field(default_factory=ContentPosition, alias="ContentStart")
    ranges: List[MatchRange] = Field(default_factory=list, alias="Ranges")
    file_name: bool = Field(False, alias="FileName")
    symbol_info: List[Optional[SymbolInfo]] = Field(default_factory=list, alias="SymbolInfo")

    @field_validator("ranges", "symbol_info", mode="before")
    @classmethod
    def null_lists(cls, v: Any) -> Any:
        return _none_to_list(v)

    @property
    def text(self) -> str:
        return decode_content(self.content)


class LineMatch(_ZoektModel):
    line: str = Field("", alias="Line")
    line_number: int = Field(0, alias="LineNumber")
    line_start: int = Field(0, alias="LineStart")
    line_end: int = Field(0, alias="LineEnd")
    file_name: bool = Field(False, alias="FileName")

    @property
    def text(self) -> str:
        return decode_content(self.line)


class FileMatch(_ZoektModel):
    repository: Optional[str] = Field(None, alias="Repository")
    repo: Optional[str] = Field(None, alias="Repo")
    file_name: str = Field(alias="FileName")
    branches: List[str] = Field(default_factory=list, alias="Branches")
    language: str = Field("", alias="Language")
    chunk_matches: List[ChunkMatch] = Field(default_factory=list, alias="ChunkMatches")
    line_matches: List[LineMatch] = Field(default_factory=list, alias="LineMatches")

    @field_validator("branches", "chunk_matches", "line_matches", mode="before")
    @classmethod
    def null_lists(cls, v: Any) -> Any:
        return _none_to_list(v)

    @field_validator("language", mode="before")
    @classmethod
    def none_language(cls, v: Any) -> Any:
        return v or ""

    @property
    def repository_name(self) -> str:
        return self.repository or self.repo or "Unknown"


class SearchStats(_ZoektModel):
    match_count: int = Field(0, alias="MatchCount")
    file_count: int = Field(0, alias="FileCount")
    duration_ns: int = Field(0, alias="Duration")
    content_bytes_loaded: int = Field(0, alias="ContentBytesLoaded")
    index_bytes_loaded: int = Field(0, alias="IndexBytesLoaded")


class SearchResult(_ZoektModel):
    file_matches: List[FileMatch] = Field(default_factory=list, alias="FileMatches")
    stats: Optional[SearchStats] = Field(None, alias="Stats")

    @field_validator("file_matches", mode="before")
    @classmethod
    def null_lists(cls, v: Any) -> Any:
        return _none_to_list(v)

    @classmethod
    def from_api(cls, payload: Any) -> "SearchResult":
        """Accepts the /api/search envelope; older servers send `Files` instead of `FileMatches`."""
        result = (payload or {}).get("Result") or {}
        if result.get("FileMatches") is None and result.get("Files") is not None:
            result = {**result, "FileMatches": result["Files"]}
        return cls.model_validate(result)


class RepositoryBranch(_ZoektModel):
    name: str = Field(alias="Name")
    version: str = Field("", alias="Version")


class RepositoryInfo(_ZoektModel):
    name: str = Field(alias="Name")
    branches: List[RepositoryBranch] = Field(default_factory=list, alias="Branches")
    has_symbols: bool = Field(False, alias="HasSymbols")

    @field_validator("branches", mode="before")
    @classmethod
    def null_lists(cls, v: Any) -> Any:
        return _none_to_list(v)


class IndexMetadata(_ZoektModel):
    index_time: Optional[datetime] = Field(None, alias="IndexTime")


class RepoStats(_ZoektModel):
    shards: int = Field(0, alias="Shards")
    documents: int = Field(0, alias="Documents")
    index_bytes: int = Field(0, alias="IndexBytes")
    content_bytes: int = Field(0, alias="ContentBytes")


class RepoListEntry(_ZoektModel):
    repository: RepositoryInfo = Field(alias="Repository")
    index_metadata: IndexMetadata = Field(default_factory=IndexMetadata, alias="IndexMetadata")
    stats: RepoStats = Field(default_factory=RepoStats, alias="Stats")

    @classmethod
    def list_from_api(cls, payload: Any) -> List["RepoListEntry"]:
        listing = (payload or {}).get("List") or {}
        return [cls.model_validate(r) for r in (listing.get("Repos") or [])]
