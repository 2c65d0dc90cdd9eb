# File: src/mcp_zoekt_search/hashing.py
from __future__ import annotations
import hashlib

FINGERPRINT_LEN = 16

def query_fingerprint(query: str) -> str:
    """
    First 16 hex chars of sha256(utf-8 query). Binds a cursor to the exact query
    text (filters included) that produced it; compared for equality only.
    """
    h = hashlib.sha256()
    h.update(query.encode("utf-8", "surrogatepass"))
    return h.hexdigest()[:FINGERPRINT_LEN]
