# File: src/mcp_zoekt_search/models/params.py
from __future__ import annotations

from typing import Annotated, Optional

from pydantic import BaseModel, Field, field_validator

MAX_LIMIT = 100
MAX_CONTEXT_LINES = 10

# Annotated aliases used on the tool signatures; FastMCP turns them into the
# published input schema.
Limit = Annotated[int, Field(ge=1, le=MAX_LIMIT, description="Maximum number of results to return (1-100)")]
ContextLines = Annotated[int, Field(ge=0, le=MAX_CONTEXT_LINES, description="Context lines around each match (0-10)")]
PageCursor = Annotated[
    Optional[str],
    Field(description="Opaque cursor from a previous response; only valid with the same query"),
]


def _trim(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    return v.strip() or None


class PageParams(BaseModel):
    limit: int = Field(default=30, ge=1, le=MAX_LIMIT)
    cursor: Optional[str] = None

    @field_validator("cursor", mode="before")
    @classmethod
    def trim_cursor(cls, v: Optional[str]) -> Optional[str]:
        return _trim(v)


class SearchParams(PageParams):
    query: str = Field(min_length=1)
    context_lines: int = Field(default=3, ge=0, le=MAX_CONTEXT_LINES)


class FileSearchParams(PageParams):
    query: str = Field(min_length=1)


class FindReferencesParams(PageParams):
    symbol: str = Field(min_length=1)
    filters: Optional[str] = None
    context_lines: int = Field(default=3, ge=0, le=MAX_CONTEXT_LINES)

    @field_validator("symbol", mode="before")
    @classmethod
    def trim_symbol(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v

    @field_validator("filters", mode="before")
    @classmethod
    def trim_filters(cls, v: Optional[str]) -> Optional[str]:
        return _trim(v)


class ListReposParams(BaseModel):
    filter: Optional[str] = None

    @field_validator("filter", mode="before")
    @classmethod
    def trim_filter(cls, v: Optional[str]) -> Optional[str]:
        return _trim(v)


class FileContentParams(BaseModel):
    repository: str = Field(min_length=1)
    path: str = Field(min_length=1)
    branch: str = Field(default="HEAD", min_length=1)
