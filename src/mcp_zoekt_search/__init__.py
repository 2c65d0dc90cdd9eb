# File: src/mcp_zoekt_search/__init__.py
"""MCP server for Zoekt code search."""

__version__ = "1.0.0"
