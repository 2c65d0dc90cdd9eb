# File: src/mcp_zoekt_search/utils/logging.py
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# ---------- small helpers ----------

def preview(s: str | bytes | Any, n: int = 200) -> str:
    if isinstance(s, bytes):
        s = s.decode("utf-8", "replace")
    s = str(s).strip()
    return s if len(s) <= n else (s[: n - 20] + "... <truncated>")

# ---------- logging setup ----------

_STD_ATTRS = {
    "name","msg","args","levelname","levelno","pathname","filename","module","exc_info",
    "exc_text","stack_info","lineno","funcName","created","msecs","relativeCreated",
    "thread","threadName","processName","process","message","asctime","taskName",
}

class ExtraJSONFormatter(logging.Formatter):
    """
    Format: "YYYY-mm-dd HH:MM:SS.mmm | LEVEL | logger | message | {json of extras}"
    """
    def formatTime(self, record, datefmt=None):
        # UTC for consistency across containers
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return f"{dt.strftime('%Y-%m-%d %H:%M:%S')}.{int(record.msecs):03d}"

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        base = f"{self.formatTime(record)} | {record.levelname} | {record.name} | {record.message}"

        extras = {k: v for k, v in record.__dict__.items() if k not in _STD_ATTRS}
        if extras:
            try:
                base = f"{base} | {json.dumps(extras, ensure_ascii=False, default=str)}"
            except (TypeError, ValueError):
                base = f'{base} | {{"_format_error":"<unserializable extras>"}}'
        if record.exc_info:
            base = f"{base}\n{self.formatException(record.exc_info)}"
        return base

def setup_logging(level: str = "INFO") -> None:
    """
    Idempotent root logging config. Writes to stderr: stdout carries the
    stdio transport.
    """
    lvl = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    if getattr(root, "_zoekt_logging_configured", False):
        root.setLevel(lvl)
        return

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(ExtraJSONFormatter())
    root.handlers[:] = [handler]
    root.setLevel(lvl)
    root._zoekt_logging_configured = True  # type: ignore[attr-defined]

    # keep SDK and server loggers on the same handler/level
    for n in ("uvicorn", "uvicorn.error", "uvicorn.access", "mcp", "mcp.server"):
        logging.getLogger(n).setLevel(lvl)
        logging.getLogger(n).handlers[:] = [handler]
        logging.getLogger(n).propagate = False
    # one line per backend request is too chatty at INFO
    logging.getLogger("httpx").setLevel(max(lvl, logging.WARNING))
