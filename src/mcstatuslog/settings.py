# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Application settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mcstatuslog.constants import DEFAULT_MAX_PARALLEL, JAVA_PROTOCOL_VERSION


class Settings(BaseSettings):
    log_level: str = "WARNING"
    max_parallel: int = Field(default=DEFAULT_MAX_PARALLEL, ge=1)
    protocol_version: int = JAVA_PROTOCOL_VERSION

    model_config = SettingsConfigDict(
        env_prefix="MCSTATUSLOG_",
        extra="ignore",
    )
