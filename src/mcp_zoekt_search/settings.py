# File: src/mcp_zoekt_search/settings.py
from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.params import MAX_CONTEXT_LINES, MAX_LIMIT

_TRANSPORT_ALIASES = {"http": "streamable-http"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    # backend
    ZOEKT_URL: str = Field(default="http://localhost:6070")
    ZOEKT_TIMEOUT_MS: int = Field(default=30000, gt=0)

    # paging
    DEFAULT_LIMIT: int = Field(default=30, ge=1, le=MAX_LIMIT)
    DEFAULT_CONTEXT_LINES: int = Field(default=3, ge=0, le=MAX_CONTEXT_LINES)

    # logging
    LOG_LEVEL: str = Field(default="INFO")

    # runner
    MCP_SERVER_NAME: str = Field(default="zoekt-mcp-server")
    MCP_TRANSPORT: str = Field(default="stdio")
    MCP_HOST: str = Field(default="0.0.0.0")
    MCP_PORT: int = Field(default=3000)
    MCP_MOUNT_PATH: str = Field(default="/mcp")
    MCP_SSE_PATH: str = Field(default="/sse")
    MCP_STATELESS_JSON: bool = Field(default=False)

    @field_validator("ZOEKT_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("ZOEKT_URL must not be empty")
        return v

    @field_validator("MCP_TRANSPORT")
    @classmethod
    def normalize_transport(cls, v: str) -> str:
        v = v.strip().lower()
        v = _TRANSPORT_ALIASES.get(v, v)
        if v not in {"stdio", "sse", "streamable-http"}:
            raise ValueError(f"Unsupported MCP_TRANSPORT: {v}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.strip().upper()
