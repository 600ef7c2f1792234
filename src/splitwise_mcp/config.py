"""Configuration for the Splitwise MCP server."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

REPO_ROOT = Path(__file__).resolve().parent.parent.parent

# Checked in order; the first non-empty value is used as the bearer token.
TOKEN_ENV_KEYS: Tuple[str, ...] = (
    "SPLITWISE_API_KEY",
    "SPLITWISE_ACCESS_TOKEN",
    "SPLITWISE_OAUTH_ACCESS_TOKEN",
    "SPLITWISE_BEARER_TOKEN",
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    service_name: str = Field(default="splitwise-mcp")
    service_version: str = Field(default="0.1.0")

    splitwise_base_url: str = Field(default="https://secure.splitwise.com/api/v3.0")
    splitwise_spec_dir: Path = Field(default=REPO_ROOT / "spec" / "paths")
    splitwise_timeout_seconds: float = Field(default=30)

    splitwise_transport: str = Field(default="stdio")
    splitwise_host: str = Field(default="127.0.0.1")
    splitwise_port: int = Field(default=8000)

    splitwise_log_level: str = Field(default="INFO")

    splitwise_spec_source_url: str = Field(
        default="https://raw.githubusercontent.com/splitwise/api-docs"
    )

    def base_url(self) -> str:
        return self.splitwise_base_url.rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
