"""Application configuration loaded from environment variables via pydantic-settings.

Usage:
    from bq_mcp_server.config import Settings
    settings = Settings()
    print(settings.gcp_project)

CLI flags in mcp_server.main() override these values at startup.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bq_mcp_server.query_guard import parse_scan_budget

# Resolve .env path relative to this file (bq_mcp_server/.env), not CWD.
_ENV_FILE = Path(__file__).parent / ".env"


class Settings(BaseSettings):
    """All server settings. Loaded from environment variables and .env file.

    Environment variables are case-insensitive. For example, GCP_PROJECT or
    gcp_project will both work.
    """

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars not defined here
        env_ignore_empty=True,  # FOO= in .env means unset
    )

    # --- Google Cloud / BigQuery ---
    gcp_project: str = Field(
        description="Default Google Cloud project for the BigQuery client",
    )
    bq_location: str | None = Field(
        default=None,
        description="BigQuery job location (region), e.g. US or asia-northeast1",
    )
    bq_query_timeout_seconds: float = Field(
        default=60.0,
        description="Timeout in seconds for BigQuery query execution",
    )

    # --- Guardrails ---
    table_filter: str | None = Field(
        default=None,
        description="Regex; only table names matching it are listed",
    )
    max_bq_query_bytes: int | None = Field(
        default=None,
        description=(
            "Scan budget in bytes. When set, queries are dry-run first and "
            "rejected if the estimate exceeds it. Non-numeric or <= 0 disables it."
        ),
    )
    tool_timeout_seconds: float | None = Field(
        default=None,
        description="Deadline for a whole tool invocation. None means no deadline.",
    )

    # --- MCP transport ---
    mcp_transport: Literal["stdio", "streamable-http"] = Field(
        default="streamable-http",
        description="MCP transport binding",
    )
    mcp_host: str = Field(default="0.0.0.0", description="HTTP bind host")
    mcp_port: int = Field(default=8080, description="HTTP bind port")

    log_level: str = Field(default="INFO", description="Log level name")

    @field_validator("max_bq_query_bytes", mode="before")
    @classmethod
    def _parse_scan_budget(cls, value):
        return parse_scan_budget(value)

    @field_validator("table_filter", "bq_location", mode="before")
    @classmethod
    def _empty_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value
