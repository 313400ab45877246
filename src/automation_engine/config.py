"""Configuration for the automation engine host.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The engine core (registries, runner) takes no configuration; these settings only
shape the reference host, the CLI and the REST adapter.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Settings for the reference host.

    Environment variables:
    - LOG_LEVEL                     (optional)
    - AUTOMATION_LOG_JSON           (optional)
    - AUTOMATION_DEFAULT_USER       (optional)
    - AUTOMATION_DEFAULT_ROLE       (optional)
    - AUTOMATION_RUN_HISTORY_LIMIT  (optional)
    - AUTOMATION_CORS_ORIGINS       (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `EngineSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="AUTOMATION_LOG_JSON",
        description="Emit structured JSON log lines instead of plain text",
    )

    default_user: str = Field(
        default="system",
        validation_alias="AUTOMATION_DEFAULT_USER",
        description="User id placed in the execution context when the caller supplies none",
    )
    default_role: str = Field(
        default="orchestrator",
        validation_alias="AUTOMATION_DEFAULT_ROLE",
        description="Role used for RBAC checks in the host dispatch layer",
    )

    run_history_limit: int = Field(
        default=100,
        ge=1,
        validation_alias="AUTOMATION_RUN_HISTORY_LIMIT",
        description="Maximum number of automation runs the host keeps in memory",
    )

    cors_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        validation_alias="AUTOMATION_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
