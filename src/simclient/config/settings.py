"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support.

Usage:
    from simclient.config import ClientSettings, LogSettings

    # Load from environment variables (SIMCLIENT_*, SIMCLIENT_LOG_*)
    settings = ClientSettings()
    log_settings = LogSettings()

    # Or override with explicit values
    settings = ClientSettings(timeout=2.0, synchronous_mode=True)
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the world facade and the local session.

    Attributes:
        timeout: Default timeout in seconds for tick and wait_for_tick.
        synchronous_mode: Start LocalEpisode in fixed-step mode.
        fixed_delta_seconds: Simulated seconds per step for LocalEpisode.
        ground_plane: LocalEpisode treats z = 0 as ground for ray queries.
        seed: Seed for LocalEpisode's random navigation locations.

    Environment Variables:
        SIMCLIENT_TIMEOUT
        SIMCLIENT_SYNCHRONOUS_MODE
        SIMCLIENT_FIXED_DELTA_SECONDS
        SIMCLIENT_GROUND_PLANE
        SIMCLIENT_SEED
    """

    model_config = SettingsConfigDict(
        env_prefix="SIMCLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    timeout: float = Field(default=10.0, ge=0.0)
    synchronous_mode: bool = False
    fixed_delta_seconds: float = Field(default=0.05, gt=0.0)
    ground_plane: bool = True
    seed: int | None = None


class LogSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the client's loguru sinks.

    Attributes:
        level: Minimum level for all sinks.
        file: Path of a rotating log file (None for stderr only).
        rotation: When to rotate the log file (loguru syntax).
        retention: How long to keep rotated files (loguru syntax).

    Environment Variables:
        SIMCLIENT_LOG_LEVEL
        SIMCLIENT_LOG_FILE
        SIMCLIENT_LOG_ROTATION
        SIMCLIENT_LOG_RETENTION
    """

    model_config = SettingsConfigDict(
        env_prefix="SIMCLIENT_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    file: str | None = None
    rotation: str = "1 day"
    retention: str = "30 days"
