"""Configuration module for Loyalty Pro."""

from loyalty_pro.config.logging import configure_logging
from loyalty_pro.config.settings import FlatSettings, get_settings

__all__ = ["FlatSettings", "get_settings", "configure_logging"]
