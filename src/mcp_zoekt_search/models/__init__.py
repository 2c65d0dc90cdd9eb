# File: src/mcp_zoekt_search/models/__init__.py
