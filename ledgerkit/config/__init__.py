"""
Configuration for ledgerkit.
"""

from ledgerkit.config.schemas import KitSettings
from ledgerkit.config.settings import LOG_FORMAT, configure_logging, settings_from_env

__all__ = [
    "KitSettings",
    "LOG_FORMAT",
    "configure_logging",
    "settings_from_env",
]
