"""Configuration helpers."""

from .config_loader import ConfigLoader, config_from_dict, get_cluster_config

__all__ = [
    "ConfigLoader",
    "config_from_dict",
    "get_cluster_config",
]
