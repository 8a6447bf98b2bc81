"""Configuration module for MinifyGym."""

from .settings import Settings, get_logging_config, settings, setup_logging

__all__ = ["Settings", "settings", "get_logging_config", "setup_logging"]
