"""Loguru setup for applications embedding the client.

The package disables its own loguru output on import; calling
``configure_logging`` turns it back on with the configured sinks.
"""

from __future__ import annotations

import sys

from loguru import logger

from simclient.config.settings import LogSettings

_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{function} | {message}"


def configure_logging(settings: LogSettings | None = None) -> None:
    """Replace loguru sinks with a stderr sink and an optional rotating file.

    Args:
        settings: Log settings. Defaults to LogSettings() (environment driven).
    """
    settings = settings or LogSettings()

    logger.remove()
    logger.add(sys.stderr, level=settings.level, format=_FORMAT)
    if settings.file is not None:
        logger.add(
            settings.file,
            level=settings.level,
            format=_FORMAT,
            rotation=settings.rotation,
            retention=settings.retention,
            enqueue=True,
            backtrace=True,
        )
    logger.enable("simclient")
    logger.debug("Logging configured at level {}", settings.level)
