"""Tests for errors.py: fault classification and error formatting."""

from __future__ import annotations

import asyncio
import re

import httpx
import pytest

from mcp_zoekt_search.errors import (
    ClassifiedError,
    CursorError,
    ErrorCode,
    ZoektError,
    classify,
    format_error,
)
from mcp_zoekt_search.pagination import CURSOR_MISMATCH, MALFORMED_CURSOR


class TestClassifyMessages:
    """Plain messages and backend faults."""

    def test_regex_syntax(self) -> None:
        c = classify("regexp: missing closing bracket")
        assert c.code is ErrorCode.QUERY_ERROR
        assert c.details["errorType"] == "regex_syntax"
        assert "regex syntax" in (c.hint or "").lower()

    def test_connection_refused(self) -> None:
        c = classify("ECONNREFUSED")
        assert c.code is ErrorCode.UNAVAILABLE
        assert c.details["errorType"] == "connection"

    def test_abort_is_timeout(self) -> None:
        c = classify("AbortError: The operation was aborted")
        assert c.code is ErrorCode.TIMEOUT

    def test_file_not_found(self) -> None:
        c = classify("file not found: src/main.ts")
        assert c.code is ErrorCode.NOT_FOUND
        assert c.details["errorType"] == "not_found"

    def test_unrecognized_message(self) -> None:
        c = classify("something odd happened")
        assert c.code is ErrorCode.QUERY_ERROR
        assert c.details["errorType"] == "unknown"
        assert c.hint is not None

    def test_message_is_kept(self) -> None:
        assert classify("something odd happened").message == "something odd happened"

    @pytest.mark.parametrize(
        "message",
        ["context deadline exceeded", "request timed out", "Search timeout"],
    )
    def test_timeout_phrases(self, message: str) -> None:
        assert classify(message).code is ErrorCode.TIMEOUT

    @pytest.mark.parametrize(
        "message",
        ["connect: connection refused", "getaddrinfo ENOTFOUND zoekt", "fetch failed", "service unavailable"],
    )
    def test_unavailable_phrases(self, message: str) -> None:
        assert classify(message).code is ErrorCode.UNAVAILABLE

    def test_unknown_field_names_the_field(self) -> None:
        c = classify('unknown field: "colour"')
        assert c.code is ErrorCode.QUERY_ERROR
        assert c.details == {"errorType": "unknown_field", "field": "colour"}
        assert '"colour"' in (c.hint or "")
        assert "repo:" in (c.hint or "")

    def test_unknown_operator_without_name(self) -> None:
        c = classify("query contains an unknown operator")
        assert c.details["errorType"] == "unknown_field"
        assert "field" not in c.details

    def test_first_rule_wins(self) -> None:
        """A timeout mention beats a not-found mention."""
        assert classify("not found after timeout").code is ErrorCode.TIMEOUT

    def test_filename_mentioning_timeout(self) -> None:
        """Substring rules are heuristic: a path containing 'timeout' reads as a timeout."""
        fault = ZoektError("File not found: repo/timeout.go", ErrorCode.NOT_FOUND, 404)
        assert classify(fault).code is ErrorCode.TIMEOUT

    def test_path_mentioning_regexp(self) -> None:
        """A path under a regexp/ directory reads as a regex syntax error."""
        fault = ZoektError("File not found: go/src/regexp/syntax/parse.go", ErrorCode.NOT_FOUND, 404)
        c = classify(fault)
        assert c.code is ErrorCode.QUERY_ERROR
        assert c.details == {"errorType": "regex_syntax"}


class TestClassifyExceptions:
    """Exception types and fault codes."""

    def test_zoekt_error_codes(self) -> None:
        assert classify(ZoektError("Search timed out after 5ms.", ErrorCode.TIMEOUT)).code is ErrorCode.TIMEOUT
        assert classify(ZoektError("backend down", ErrorCode.UNAVAILABLE)).code is ErrorCode.UNAVAILABLE
        assert classify(ZoektError("missing file", ErrorCode.NOT_FOUND)).code is ErrorCode.NOT_FOUND

    def test_status_code_404(self) -> None:
        c = classify(ZoektError("nope", ErrorCode.QUERY_ERROR, 404))
        assert c.code is ErrorCode.NOT_FOUND

    def test_httpx_status_error(self) -> None:
        request = httpx.Request("GET", "http://zoekt.test/print")
        response = httpx.Response(404, request=request)
        exc = httpx.HTTPStatusError("Client error", request=request, response=response)
        assert classify(exc).code is ErrorCode.NOT_FOUND

    def test_httpx_timeout(self) -> None:
        assert classify(httpx.ReadTimeout("")).code is ErrorCode.TIMEOUT

    def test_asyncio_timeout_without_text(self) -> None:
        c = classify(asyncio.TimeoutError())
        assert c.code is ErrorCode.TIMEOUT
        assert c.message == "TimeoutError"

    def test_httpx_connect_error(self) -> None:
        assert classify(httpx.ConnectError("boom")).code is ErrorCode.UNAVAILABLE

    def test_connection_refused_error(self) -> None:
        assert classify(ConnectionRefusedError(111, "refused")).code is ErrorCode.UNAVAILABLE

    def test_re_error(self) -> None:
        with pytest.raises(re.error) as exc:
            re.compile("[abc")
        c = classify(exc.value)
        assert c.code is ErrorCode.QUERY_ERROR
        assert c.details["errorType"] == "regex_syntax"

    def test_file_not_found_error(self) -> None:
        assert classify(FileNotFoundError("gone")).code is ErrorCode.NOT_FOUND

    @pytest.mark.parametrize("reason", [MALFORMED_CURSOR, CURSOR_MISMATCH])
    def test_cursor_error(self, reason: str) -> None:
        """Cursor faults are query errors with their own hint."""
        c = classify(CursorError(reason))
        assert c.code is ErrorCode.QUERY_ERROR
        assert c.message == reason
        assert c.details["errorType"] == "invalid_cursor"
        assert "same query" in (c.hint or "")

    def test_arbitrary_exception(self) -> None:
        c = classify(KeyError("x"))
        assert c.code is ErrorCode.QUERY_ERROR
        assert c.details["errorType"] == "unknown"


class TestFormatError:
    """Tests for format_error."""

    @pytest.mark.parametrize("code", list(ErrorCode))
    def test_every_code(self, code: ErrorCode) -> None:
        text = format_error(ClassifiedError(code=code, message="boom", hint="try again"))
        assert text == f"**Error [{code.value}]**: boom\n\n**Hint**: try again"

    def test_without_hint(self) -> None:
        text = format_error(ClassifiedError(code=ErrorCode.NOT_FOUND, message="gone"))
        assert text == "**Error [NOT_FOUND]**: gone"

    def test_classified_output(self) -> None:
        text = format_error(classify("regexp: missing closing bracket"))
        assert text.startswith("**Error [QUERY_ERROR]**: regexp: missing closing bracket")
        assert "**Hint**: Check regex syntax" in text
