"""Configuration module for codeswitch."""

from codeswitch.config.loader import UserConfig, load_user_config, parse_user_config
from codeswitch.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "UserConfig",
    "load_user_config",
    "parse_user_config",
]
