"""Tender configuration schema — YAML + Pydantic + env override."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tender.core.tenders.types import WORKFLOW_DIR


# ════════════════════════════════════════════════════════════
# SUB-CONFIGS (nested BaseModel)
# ════════════════════════════════════════════════════════════


class StorageConfig(BaseModel):
    """Where managed workflow documents live, relative to the repo root."""

    workflow_dir: str = WORKFLOW_DIR


class ToolsConfig(BaseModel):
    """External CLIs (agent listing, workflow dispatch)."""

    agent_cli: str = "opencode"
    dispatch_cli: str = "gh"
    timeout_s: float = 10.0


class MenuConfig(BaseModel):
    raw_poll_interval_s: float = 0.01
    raw_idle_timeout_s: float = 6.0
    panel_width: int = 86


class LoggingConfig(BaseModel):
    level: str = "WARNING"


# ════════════════════════════════════════════════════════════
# ROOT CONFIG
# ════════════════════════════════════════════════════════════


class TenderConfig(BaseSettings):
    """
    Root configuration.

    Priority: env vars > .env > YAML (init kwargs) > defaults

    Env override examples:
        TENDER_TOOLS__DISPATCH_CLI=/usr/local/bin/gh
        TENDER_MENU__RAW_IDLE_TIMEOUT_S=30
        TENDER_LOGGING__LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="TENDER_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    menu: MenuConfig = Field(default_factory=MenuConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # YAML arrives as init kwargs; env and .env must still win over it.
        return env_settings, dotenv_settings, init_settings, file_secret_settings
