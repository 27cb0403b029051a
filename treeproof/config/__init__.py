"""
Configuration management for Treeproof.

Handles loading and validation of configuration files.
"""

from treeproof.config.settings import (
    HashingConfig,
    LoggingConfig,
    TreeConfig,
    TreeproofConfig,
    get_default_config,
    get_default_config_path,
    load_config,
)

__all__ = [
    "HashingConfig",
    "LoggingConfig",
    "TreeConfig",
    "TreeproofConfig",
    "get_default_config",
    "get_default_config_path",
    "load_config",
]
