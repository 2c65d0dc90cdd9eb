# File: src/mcp_zoekt_search/zoekt/__init__.py
from .client import ZoektClient

__all__ = ["ZoektClient"]
