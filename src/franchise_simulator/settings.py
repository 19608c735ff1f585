from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FRANCHISE_SIM_", env_file=".env", extra="ignore")

    params_file: Optional[Path] = Field(default=None, description="JSON parameter set, built-in defaults when unset")
    default_horizon_months: int = Field(default=60, ge=1)
    log_level: str = "INFO"
    event_log_limit: int = Field(default=200, ge=1)
    history_limit: int = Field(default=100, ge=1)
