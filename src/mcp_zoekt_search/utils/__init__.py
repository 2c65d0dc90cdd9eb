# File: src/mcp_zoekt_search/utils/__init__.py
