"""Configuration module using Pydantic Settings.

Provides typed configuration for the client with environment variable support.

Usage:
    from simclient.config import ClientSettings, LogSettings, configure_logging

    settings = ClientSettings(timeout=5.0)
    configure_logging(LogSettings(level="DEBUG"))
"""

from simclient.config.log import configure_logging
from simclient.config.settings import ClientSettings, LogSettings

__all__ = [
    "ClientSettings",
    "LogSettings",
    "configure_logging",
]
