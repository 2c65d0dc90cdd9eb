# File: src/mcp_zoekt_search/formatting.py
from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, TypeVar

T = TypeVar("T")

_LANGUAGES = {
    "ts": "typescript", "tsx": "typescript",
    "js": "javascript", "jsx": "javascript",
    "py": "python", "go": "go", "rs": "rust",
    "java": "java", "kt": "kotlin", "rb": "ruby", "php": "php",
    "c": "c", "h": "c", "cpp": "cpp", "hpp": "cpp",
    "cs": "csharp", "swift": "swift",
    "sh": "bash", "bash": "bash", "zsh": "bash",
    "json": "json", "yaml": "yaml", "yml": "yaml", "toml": "toml", "xml": "xml",
    "md": "markdown", "sql": "sql",
    "html": "html", "css": "css", "scss": "scss", "less": "less",
}

_UNITS = ("B", "KB", "MB", "GB", "TB")


def detect_language(path: str) -> str:
    """Fence tag for a file path, '' when unknown."""
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    return _LANGUAGES.get(name.rsplit(".", 1)[-1].lower(), "")


def _scale(num_bytes: float) -> tuple[float, int]:
    size, idx = float(num_bytes), 0
    while size >= 1024 and idx < len(_UNITS) - 1:
        size /= 1024
        idx += 1
    return size, idx


def format_bytes(num_bytes: int) -> str:
    size, idx = _scale(num_bytes)
    return f"{size:.1f} {_UNITS[idx]}"


def format_bytes_compact(num_bytes: int) -> str:
    size, idx = _scale(num_bytes)
    return f"{int(size)} {_UNITS[idx]}" if idx == 0 else f"{size:.1f} {_UNITS[idx]}"


def format_number(num: int) -> str:
    return f"{num:,}"


def group_by(items: Iterable[T], key: Callable[[T], str]) -> Dict[str, List[T]]:
    """Insertion-ordered grouping; keeps backend ranking inside each group."""
    groups: Dict[str, List[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def more_results_footer(next_cursor: Optional[str]) -> str:
    if not next_cursor:
        return ""
    return f"---\n\n📄 More results available. Use cursor: `{next_cursor}`\n"
