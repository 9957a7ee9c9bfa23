"""Utility functions."""
from .config_manager import ConfigManager, AppConfig, get_config_manager, get_config
from .logger import setup_logging

__all__ = [
    "ConfigManager", "AppConfig", "get_config_manager", "get_config",
    "setup_logging",
]
