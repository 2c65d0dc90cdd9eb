"""Tests for formatting.py helpers."""

from __future__ import annotations

import pytest

from mcp_zoekt_search.formatting import (
    detect_language,
    format_bytes,
    format_bytes_compact,
    format_number,
    group_by,
    more_results_footer,
)


@pytest.mark.parametrize(
    "path,lang",
    [
        ("src/main.go", "go"),
        ("web/App.TSX", "typescript"),
        ("scripts/run.sh", "bash"),
        ("Makefile", ""),
        ("dir.with.dots/README", ""),
        ("notes.unknownext", ""),
    ],
)
def test_detect_language(path: str, lang: str) -> None:
    assert detect_language(path) == lang


def test_format_bytes() -> None:
    assert format_bytes(0) == "0.0 B"
    assert format_bytes(1536) == "1.5 KB"
    assert format_bytes(5 * 1024 ** 3) == "5.0 GB"


def test_format_bytes_compact() -> None:
    assert format_bytes_compact(512) == "512 B"
    assert format_bytes_compact(2048) == "2.0 KB"


def test_format_number() -> None:
    assert format_number(999) == "999"
    assert format_number(1234567) == "1,234,567"


def test_group_by_keeps_order() -> None:
    groups = group_by(["b1", "a1", "b2", "a2"], lambda s: s[0])
    assert list(groups) == ["b", "a"]
    assert groups["b"] == ["b1", "b2"]


def test_more_results_footer() -> None:
    assert more_results_footer(None) == ""
    assert more_results_footer("") == ""
    assert more_results_footer("abc") == "---\n\n📄 More results available. Use cursor: `abc`\n"
