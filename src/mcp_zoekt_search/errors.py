# File: src/mcp_zoekt_search/errors.py
"""Backend fault types and the four-code error taxonomy shared by every tool.

Every failure that reaches a tool handler (backend fault, transport fault,
cursor fault, or a bare message string) is mapped onto exactly one of
UNAVAILABLE / QUERY_ERROR / TIMEOUT / NOT_FOUND by an ordered rule table,
then rendered as a uniform Markdown block.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Pattern, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(str, Enum):
    UNAVAILABLE = "UNAVAILABLE"
    QUERY_ERROR = "QUERY_ERROR"
    TIMEOUT = "TIMEOUT"
    NOT_FOUND = "NOT_FOUND"


class ZoektError(Exception):
    """Fault raised by the Zoekt client."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.QUERY_ERROR,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class CursorError(ZoektError):
    """Cursor rejected by the validator (malformed, negative or bound to another query)."""

    def __init__(self, reason: str):
        super().__init__(reason, code=ErrorCode.QUERY_ERROR)
        self.reason = reason


class ClassifiedError(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: ErrorCode
    message: str
    hint: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)


VALID_QUERY_FIELDS = (
    "file:", "f:",
    "repo:", "r:",
    "lang:", "l:",
    "branch:", "b:",
    "sym:",
    "content:", "c:",
    "case:",
    "type:", "t:",
    "archived:", "a:",
    "fork:",
    "public:",
    "regex:",
)

_FIELD_LIST = ", ".join(VALID_QUERY_FIELDS)

_FIELD_PATTERN = re.compile(
    r"(?:unknown|invalid|unrecognized) (?:field|operator)[:\s]+[\"']?(\w+)[\"']?",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class _Rule:
    """One (predicate, outcome) row. A rule hits on any of its predicates."""

    code: ErrorCode
    error_type: str
    hint: str
    exc_types: Tuple[type, ...] = ()
    fault_codes: Tuple[ErrorCode, ...] = ()
    status_codes: Tuple[int, ...] = ()
    substrings: Tuple[str, ...] = ()
    pattern: Optional[Pattern[str]] = None
    field_hint: Optional[str] = None
    catch_all: bool = False

    def match(self, fault: object, message: str) -> Optional[Dict[str, Any]]:
        details: Dict[str, Any] = {"errorType": self.error_type}
        if self.catch_all:
            return details
        if self.exc_types and isinstance(fault, self.exc_types):
            return details
        if self.fault_codes and isinstance(fault, ZoektError) and fault.code in self.fault_codes:
            return details
        if self.status_codes and _status_of(fault) in self.status_codes:
            return details
        if self.pattern is not None:
            m = self.pattern.search(message)
            if m:
                details["field"] = m.group(1)
                return details
        lowered = message.lower()
        if any(s in lowered for s in self.substrings):
            return details
        return None

    def hint_for(self, details: Dict[str, Any]) -> str:
        if self.field_hint and details.get("field"):
            return self.field_hint % details["field"]
        return self.hint


# First match wins. Order matters: "timed out" must be seen before any
# generic query rule, and connection faults before "not found".
_RULES: Tuple[_Rule, ...] = (
    _Rule(
        code=ErrorCode.QUERY_ERROR,
        error_type="invalid_cursor",
        hint="Cursors are bound to the query that produced them. Repeat the request "
             "with the same query, or omit the cursor to start from the first page.",
        exc_types=(CursorError,),
    ),
    _Rule(
        code=ErrorCode.TIMEOUT,
        error_type="timeout",
        hint="Search timed out. Try: (1) more specific query terms, (2) add repo: or file: filters, "
             "(3) use lang: to limit language scope, (4) reduce result limit.",
        exc_types=(httpx.TimeoutException, asyncio.TimeoutError, TimeoutError),
        fault_codes=(ErrorCode.TIMEOUT,),
        substrings=("timeout", "timed out", "deadline exceeded", "aborterror", "operation was aborted"),
    ),
    _Rule(
        code=ErrorCode.UNAVAILABLE,
        error_type="connection",
        hint="Zoekt backend is not reachable. Verify zoekt-webserver is running and accessible.",
        exc_types=(httpx.NetworkError, ConnectionError),
        fault_codes=(ErrorCode.UNAVAILABLE,),
        substrings=(
            "unavailable",
            "connection refused",
            "econnrefused",
            "enotfound",
            "network error",
            "network is unreachable",
            "fetch failed",
            "cannot connect",
            "name or service not known",
        ),
    ),
    _Rule(
        code=ErrorCode.QUERY_ERROR,
        error_type="regex_syntax",
        hint="Check regex syntax. Use /pattern/ for regex patterns, or \"text\" for literal text. "
             "Common issues: unescaped special characters (.*+?^$[]{}|\\), unbalanced parentheses.",
        exc_types=(re.error,),
        substrings=(
            "regexp",
            "regex",
            "parse error",
            "invalid pattern",
            "unterminated",
            "unbalanced",
            "missing )",
            "missing ]",
            "missing closing",
            "bad escape",
            "invalid escape",
        ),
    ),
    _Rule(
        code=ErrorCode.QUERY_ERROR,
        error_type="unknown_field",
        hint=f"Unknown query field or operator. Valid fields: {_FIELD_LIST}",
        field_hint=f"Unknown query field \"%s\". Valid fields: {_FIELD_LIST}",
        pattern=_FIELD_PATTERN,
        substrings=(
            "unknown field",
            "unknown operator",
            "invalid field",
            "invalid operator",
            "unrecognized field",
            "unrecognized operator",
        ),
    ),
    _Rule(
        code=ErrorCode.NOT_FOUND,
        error_type="not_found",
        hint="The requested resource was not found. Verify the repository name and file path are correct.",
        exc_types=(FileNotFoundError,),
        fault_codes=(ErrorCode.NOT_FOUND,),
        status_codes=(404,),
        substrings=("not found", "404", "no such file"),
    ),
    _Rule(
        code=ErrorCode.QUERY_ERROR,
        error_type="unknown",
        hint="Check query syntax. See Zoekt documentation for supported operators and fields.",
        catch_all=True,
    ),
)


def _status_of(fault: object) -> Optional[int]:
    if isinstance(fault, httpx.HTTPStatusError):
        return fault.response.status_code
    return getattr(fault, "status_code", None)


def _message_of(fault: object) -> str:
    if isinstance(fault, str):
        return fault
    if isinstance(fault, ZoektError):
        return fault.message
    if isinstance(fault, BaseException):
        # httpx timeouts and asyncio.TimeoutError often carry no text
        return str(fault) or type(fault).__name__
    return str(fault)


def classify(fault: object) -> ClassifiedError:
    """Map any fault (exception, transport fault or plain message) onto the taxonomy."""
    message = _message_of(fault)
    for rule in _RULES:
        details = rule.match(fault, message)
        if details is not None:
            return ClassifiedError(
                code=rule.code,
                message=message,
                hint=rule.hint_for(details),
                details=details,
            )
    raise AssertionError("classification table has no catch-all rule")


def format_error(error: ClassifiedError) -> str:
    out = f"**Error [{error.code.value}]**: {error.message}"
    if error.hint:
        out += f"\n\n**Hint**: {error.hint}"
    return out
