"""
Configuration management for Treeproof.

Loads YAML configuration from file with sensible defaults and validation.
Supports environment variable substitution using ${ENV_VAR} syntax.
"""

import hashlib
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from treeproof.exceptions import InvalidConfigurationError
from treeproof.logging_config import get_logger

logger = get_logger(__name__)


def _expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Args:
        value: Configuration value (string, dict, list, or other)

    Returns:
        Value with environment variables expanded

    Examples:
        "${TREEPROOF_HASH}" -> value of TREEPROOF_HASH env var
        "${TREEPROOF_HASH:md5}" -> value of TREEPROOF_HASH or "md5" if not set
    """
    if isinstance(value, str):
        # Pattern matches ${VAR} or ${VAR:default}
        pattern = r'\$\{([^}:]+)(?::([^}]*))?\}'

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    else:
        return value


def _as_bool(value: Any) -> bool:
    # Env var expansion always yields strings
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass
class HashingConfig:
    """Digest configuration for leaf and node hashes."""

    algorithm: str = "md5"  # any fixed-length hashlib algorithm
    encoding: str = "utf-8"  # text encoding for non-bytes values


@dataclass
class TreeConfig:
    """Merkle tree query configuration."""

    strict_branch_validation: bool = False  # also check node shape, not only hash membership


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    json_format: bool = True


@dataclass
class TreeproofConfig:
    """Main Treeproof configuration."""

    hashing: HashingConfig = field(default_factory=HashingConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    return os.path.expanduser("~/.treeproof/config.yaml")


def get_default_config() -> TreeproofConfig:
    """
    Get default configuration with sensible defaults.

    Returns:
        TreeproofConfig: Default configuration object
    """
    return TreeproofConfig(
        hashing=HashingConfig(algorithm="md5", encoding="utf-8"),
        tree=TreeConfig(strict_branch_validation=False),
        logging=LoggingConfig(level="INFO", file="", json_format=True),
    )


def load_config(config_path: Optional[str] = None) -> TreeproofConfig:
    """
    Load configuration from YAML file with validation.

    If config file is not found, returns default configuration.
    If config file is malformed or invalid, raises InvalidConfigurationError.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        TreeproofConfig: Loaded and validated configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid or malformed
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = os.path.expanduser(str(config_path))

    if not os.path.exists(config_path):
        logger.info(f"Configuration file not found at {config_path}, using defaults")
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
        logger.debug(f"Loaded configuration from {config_path}")
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        )
    except OSError as e:
        logger.error(f"Failed to read configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        )

    if config_data is None:
        logger.info(f"Configuration file {config_path} is empty, using defaults")
        return get_default_config()

    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Configuration file '{config_path}' must contain a mapping at the top level"
        )

    config_data = _expand_env_vars(config_data)

    try:
        config = _build_config_from_dict(config_data)
        _validate_config(config)
    except InvalidConfigurationError as e:
        logger.error(f"Invalid configuration in '{config_path}': {e}")
        raise
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid configuration in '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': {e}"
        )

    logger.info(f"Successfully loaded and validated configuration from {config_path}")
    return config


def _section(config_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return a configuration section, or an empty one if it is absent."""
    section = config_data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise InvalidConfigurationError(
            f"Configuration section '{name}' must be a mapping, "
            f"got {type(section).__name__}"
        )
    return section


def _build_config_from_dict(config_data: Dict[str, Any]) -> TreeproofConfig:
    """
    Build configuration object from dictionary.

    Sections missing from the file keep their defaults.

    Args:
        config_data: Configuration dictionary loaded from YAML

    Returns:
        TreeproofConfig: Configuration object
    """
    defaults = get_default_config()

    hashing_data = _section(config_data, 'hashing')
    hashing = HashingConfig(
        algorithm=str(hashing_data.get('algorithm', defaults.hashing.algorithm)),
        encoding=str(hashing_data.get('encoding', defaults.hashing.encoding)),
    )

    tree_data = _section(config_data, 'tree')
    tree = TreeConfig(
        strict_branch_validation=_as_bool(
            tree_data.get('strict_branch_validation', defaults.tree.strict_branch_validation)
        ),
    )

    logging_data = _section(config_data, 'logging')
    logging = LoggingConfig(
        level=str(logging_data.get('level', defaults.logging.level)),
        file=str(logging_data.get('file', defaults.logging.file) or ""),
        json_format=_as_bool(logging_data.get('json_format', defaults.logging.json_format)),
    )

    return TreeproofConfig(hashing=hashing, tree=tree, logging=logging)


def _validate_config(config: TreeproofConfig) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration to validate

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    algorithm = config.hashing.algorithm.lower()
    if algorithm not in hashlib.algorithms_available:
        raise InvalidConfigurationError(
            f"hashing algorithm must be a hashlib algorithm, got '{config.hashing.algorithm}'"
        )
    if algorithm.startswith("shake"):
        raise InvalidConfigurationError(
            f"hashing algorithm must have a fixed digest length, got '{config.hashing.algorithm}'"
        )

    try:
        "".encode(config.hashing.encoding)
    except LookupError:
        raise InvalidConfigurationError(
            f"unknown text encoding '{config.hashing.encoding}'"
        )

    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if config.logging.level.upper() not in valid_log_levels:
        raise InvalidConfigurationError(
            f"logging level must be one of {valid_log_levels}, "
            f"got '{config.logging.level}'"
        )
