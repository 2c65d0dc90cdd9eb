# File: src/mcp_zoekt_search/tools/base.py
from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable, Dict

from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import CallToolResult, TextContent

from ..errors import classify, format_error
from ..utils.logging import preview

log = logging.getLogger("mcp.zoekt.tools")


def elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


async def run_tool(name: str, fields: Dict[str, Any], body: Callable[[], Awaitable[str]]) -> str:
    """
    Run one tool call. Any fault is classified and re-raised as ToolError
    carrying the formatted text, which the SDK returns as an error result.
    """
    started = time.perf_counter()
    log.info(f"{name}.request", extra=fields)
    try:
        text = await body()
    except Exception as e:
        classified = classify(e)
        log.error(
            f"{name}.error",
            extra={
                **fields,
                "duration_ms": elapsed_ms(started),
                "code": classified.code.value,
                "error": preview(classified.message),
            },
        )
        raise ToolError(format_error(classified)) from e
    log.info(f"{name}.complete", extra={**fields, "duration_ms": elapsed_ms(started)})
    return text


async def to_result(call: Awaitable[str]) -> CallToolResult:
    """
    Shape a tool call for the SDK. Returning the result ourselves keeps the
    error text exactly as format_error() rendered it.
    """
    try:
        text = await call
    except ToolError as e:
        return CallToolResult(isError=True, content=[TextContent(type="text", text=str(e))])
    return CallToolResult(content=[TextContent(type="text", text=text)])
