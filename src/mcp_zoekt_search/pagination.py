# File: src/mcp_zoekt_search/pagination.py
"""Stateless cursor pagination.

A cursor is base64url(JSON {"q": <query fingerprint>, "o": <offset>}). All
pagination state travels in the token; nothing is kept server side. Cursors
issued before the page size was dropped from the payload also carry "l" and
are still accepted (the field is ignored).
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from .errors import CursorError
from .hashing import query_fingerprint

T = TypeVar("T")

Fetch = Callable[[str, int], Awaitable[Sequence[T]]]

MALFORMED_CURSOR = "Invalid cursor format"
CURSOR_MISMATCH = "Cursor does not match current query. Cursors are only valid for the same query."
NEGATIVE_OFFSET = "Invalid cursor: negative offset"


class Cursor(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    q: StrictStr
    o: StrictInt = Field(ge=0)


class CursorValidation(BaseModel):
    valid: bool
    offset: int = 0
    error: Optional[str] = None


class Page(BaseModel, Generic[T]):
    items: List[T]
    next_cursor: Optional[str] = None
    offset: int = 0

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None


def encode_cursor(query: str, offset: int) -> str:
    if offset < 0:
        raise ValueError(f"Cursor offset must be non-negative, got {offset}")
    data = {"q": query_fingerprint(query), "o": offset}
    raw = json.dumps(data, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_cursor(token: str) -> Optional[Cursor]:
    """
    Returns None for anything that is not a well-formed cursor. Accepts both the
    URL-safe and the standard base64 alphabet, padded or not.
    """
    try:
        s = token.strip().replace("-", "+").replace("_", "/")
        s += "=" * (-len(s) % 4)
        raw = base64.b64decode(s.encode("ascii"), validate=True)
        data = json.loads(raw.decode("utf-8"))
        return Cursor.model_validate(data)
    except (ValueError, binascii.Error, ValidationError, RecursionError):
        # RecursionError: deeply nested JSON arrays or objects
        return None


def validate_cursor(token: Optional[str], query: str) -> CursorValidation:
    if token is None or token == "":
        return CursorValidation(valid=True, offset=0)

    decoded = decode_cursor(token)
    if decoded is None:
        return CursorValidation(valid=False, error=MALFORMED_CURSOR)
    if decoded.q != query_fingerprint(query):
        return CursorValidation(valid=False, error=CURSOR_MISMATCH)
    if decoded.o < 0:
        return CursorValidation(valid=False, error=NEGATIVE_OFFSET)
    return CursorValidation(valid=True, offset=decoded.o)


def resolve_offset(token: Optional[str], query: str) -> int:
    """Offset to resume from; a rejected cursor is an error, never page one."""
    result = validate_cursor(token, query)
    if not result.valid:
        raise CursorError(result.error or MALFORMED_CURSOR)
    return result.offset


def fetch_count(offset: int, limit: int) -> int:
    # one lookahead item tells us whether another page exists
    return offset + limit + 1


def slice_window(items: Sequence[T], query: str, offset: int, limit: int) -> Page[T]:
    end = offset + limit
    window = list(items[offset:end])
    next_cursor = encode_cursor(query, end) if len(items) > end else None
    return Page(items=window, next_cursor=next_cursor, offset=offset)


async def paginate(query: str, limit: int, cursor: Optional[str], fetch: Fetch[T]) -> Page[T]:
    """
    Validate `cursor` against `query`, issue one backend fetch sized
    offset + limit + 1, and cut the [offset, offset + limit) window from it.
    """
    offset = resolve_offset(cursor, query)
    items = await fetch(query, fetch_count(offset, limit))
    return slice_window(items, query, offset, limit)
