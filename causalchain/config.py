# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ("ChainSettings", "settings")


class ChainSettings(BaseSettings, frozen=True):
    """Package settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="CAUSALCHAIN_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Level of the package logger"
    )
    PROPAGATE_SUBSCRIBER_ERRORS: bool = Field(
        False,
        description="Re-raise subscriber exceptions from EventManager.post "
        "instead of logging them",
    )

    @field_validator("LOG_LEVEL", mode="before")
    def _validate_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value


# Create a singleton instance
settings = ChainSettings()
