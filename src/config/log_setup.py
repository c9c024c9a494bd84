"""
Farkle - Logging Setup

Configures the root logger once from application settings. Modules log
through ``logging.getLogger(__name__)``.
"""

import logging

from src.config.settings import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings | None = None) -> int:
    """
    Apply the configured log level to the root logger.

    Args:
        settings: Settings to read (defaults to the cached instance)

    Returns:
        The numeric level that was applied
    """
    settings = settings or get_settings()
    level_name = "DEBUG" if settings.debug else settings.log_level.upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    # Keep HTTP client chatter out of game logs
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    return level
