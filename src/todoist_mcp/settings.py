"""
Runtime configuration.

Settings are read from the process environment exactly once, at startup,
and are immutable afterwards. The resulting value is injected into the
client, dispatcher and HTTP app rather than looked up ad hoc.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from todoist_mcp.exceptions import TodoistConfigurationError

DEFAULT_API_BASE_URL = "https://api.todoist.com/api/v1"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"", "0", "false", "no", "off"}
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise TodoistConfigurationError(f"{name} must be a boolean (true/false), got {raw!r}")


class Settings(BaseModel):
    """Immutable server configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    todoist_api_token: str = Field(..., min_length=1)
    mcp_auth_token: Optional[str] = None
    dry_run: bool = False
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout: float = Field(default=30.0, gt=0)
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def known_log_level(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip().upper()
            if v not in LOG_LEVELS:
                raise ValueError(f"must be one of {', '.join(LOG_LEVELS)}")
        return v

    @property
    def auth_enabled(self) -> bool:
        """Whether /mcp requests must present the shared bearer token."""
        return bool(self.mcp_auth_token)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """
        Build settings from environment variables.

        Raises:
            TodoistConfigurationError: If TODOIST_API_TOKEN is missing or a
                value cannot be parsed.
        """
        env = os.environ if environ is None else environ

        token = env.get("TODOIST_API_TOKEN", "").strip()
        if not token:
            raise TodoistConfigurationError(
                "TODOIST_API_TOKEN environment variable is required. "
                "Get it from Todoist Settings → Integrations → Developer."
            )

        values: dict[str, object] = {"todoist_api_token": token}

        auth_token = env.get("MCP_AUTH_TOKEN", "").strip()
        if auth_token:
            values["mcp_auth_token"] = auth_token

        for name in ("DRYRUN", "DRY_RUN"):
            if name in env:
                values["dry_run"] = _parse_bool(name, env[name])
                break

        if env.get("TODOIST_API_URL"):
            values["api_base_url"] = env["TODOIST_API_URL"].rstrip("/")
        if env.get("TODOIST_TIMEOUT"):
            values["request_timeout"] = env["TODOIST_TIMEOUT"]
        if env.get("HOST"):
            values["host"] = env["HOST"]
        if env.get("PORT"):
            values["port"] = env["PORT"]
        if env.get("LOG_LEVEL"):
            values["log_level"] = env["LOG_LEVEL"].upper()

        try:
            return cls(**values)
        except ValidationError as e:
            raise TodoistConfigurationError(f"Invalid configuration: {e}") from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings, reading the environment on first use."""
    return Settings.from_env()
