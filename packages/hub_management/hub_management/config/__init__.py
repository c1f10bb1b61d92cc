"""Configuration package for hub management."""

from .config import HubManagementConfig, get_config, reload_config

__all__ = ["HubManagementConfig", "get_config", "reload_config"]
