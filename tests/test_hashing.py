"""Tests for hashing.py: query fingerprints."""

from __future__ import annotations

import re

from mcp_zoekt_search.hashing import FINGERPRINT_LEN, query_fingerprint


class TestQueryFingerprint:
    """Tests for query_fingerprint."""

    def test_known_digest_prefix(self) -> None:
        """Prefix of the sha256 hex digest."""
        assert query_fingerprint("") == "e3b0c44298fc1c14"
        assert query_fingerprint("abc") == "ba7816bf8f01cfea"

    def test_shape(self) -> None:
        """Sixteen lowercase hex characters."""
        fp = query_fingerprint("sym:handleRequest lang:go")
        assert len(fp) == FINGERPRINT_LEN
        assert re.fullmatch(r"[0-9a-f]{16}", fp)

    def test_deterministic(self) -> None:
        """Same query, same fingerprint."""
        assert query_fingerprint("repo:foo bar") == query_fingerprint("repo:foo bar")

    def test_distinct_queries_differ(self) -> None:
        """Near-identical queries still differ."""
        assert query_fingerprint("sym:handleRequest") != query_fingerprint("sym:handleResponse")

    def test_filters_are_part_of_the_query(self) -> None:
        """Adding a filter changes the fingerprint."""
        assert query_fingerprint("foo") != query_fingerprint("foo lang:go")

    def test_non_ascii(self) -> None:
        """Unicode and lone surrogates are hashed without raising."""
        assert len(query_fingerprint("héllo 世界")) == FINGERPRINT_LEN
        assert len(query_fingerprint("bad \ud800 surrogate")) == FINGERPRINT_LEN
