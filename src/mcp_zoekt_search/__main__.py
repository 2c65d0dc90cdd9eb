# File: src/mcp_zoekt_search/__main__.py
from __future__ import annotations

import logging
import sys

from . import __version__
from .utils.logging import setup_logging

USAGE = """\
zoekt-mcp: MCP server exposing Zoekt code search.

Usage: zoekt-mcp [-h | --help] [-v | --version]

Environment:
  ZOEKT_URL              zoekt-webserver base URL (default http://localhost:6070)
  ZOEKT_TIMEOUT_MS       per-request timeout in ms (default 30000)
  LOG_LEVEL              DEBUG, INFO, WARNING, ERROR (default INFO)
  MCP_TRANSPORT          stdio, sse or streamable-http (default stdio)
  MCP_HOST / MCP_PORT    bind address for network transports
"""


def main() -> None:
    """
    Entry point for running the server via the official SDK runner.

    Examples:
      ZOEKT_URL=http://zoekt:6070 python -m mcp_zoekt_search
      MCP_TRANSPORT=streamable-http MCP_PORT=3000 zoekt-mcp
    """
    args = sys.argv[1:]
    if any(a in ("-h", "--help") for a in args):
        sys.stderr.write(USAGE)
        sys.stderr.flush()
        return
    if any(a in ("-v", "--version") for a in args):
        sys.stdout.write(f"{__version__}\n")
        return

    # settings are read on import
    from .server import mcp, settings

    setup_logging(settings.LOG_LEVEL)
    log = logging.getLogger("mcp.zoekt.main")

    transport = settings.MCP_TRANSPORT
    mcp.settings.host = settings.MCP_HOST
    mcp.settings.port = settings.MCP_PORT

    if transport == "streamable-http":
        mcp.settings.streamable_http_path = settings.MCP_MOUNT_PATH
    elif transport == "sse":
        mcp.settings.sse_path = settings.MCP_SSE_PATH

    if settings.MCP_STATELESS_JSON:
        mcp.settings.stateless_http = True
        mcp.settings.json_response = True

    log.info(
        "server.start",
        extra={
            "version": __version__,
            "zoekt_url": settings.ZOEKT_URL,
            "transport": transport,
            "host": settings.MCP_HOST if transport != "stdio" else None,
            "port": settings.MCP_PORT if transport != "stdio" else None,
        },
    )

    mcp.run(transport=transport)


if __name__ == "__main__":
    main()
