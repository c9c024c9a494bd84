"""
Farkle Configuration.

Environment variables, settings, and logging configuration.
"""

from src.config.log_setup import configure_logging
from src.config.settings import Settings, get_settings

__all__ = ["Settings", "configure_logging", "get_settings"]
