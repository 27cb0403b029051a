"""
Logging configuration for Treeproof.

Provides centralized structured logging setup with JSON output for production
and human-readable output for development.
"""

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

import structlog

if TYPE_CHECKING:
    from treeproof.config.settings import LoggingConfig


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    json_format: bool = True,
) -> None:
    """
    Configure structured logging for Treeproof.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to log file. If None, logs only to stderr.
        json_format: If True, use JSON format. If False, use human-readable format.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(file_handler)
    else:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(numeric_level)
        stderr_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(stderr_handler)

    processors: list = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def setup_logging_from_config(config: "LoggingConfig") -> None:
    """
    Configure structured logging from the logging section of the configuration.

    An empty file setting means stderr.

    Args:
        config: LoggingConfig loaded through treeproof.config.load_config
    """
    setup_logging(
        level=config.level,
        log_file=Path(config.file) if config.file else None,
        json_format=config.json_format,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance for a specific module.

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        Structured logger instance.
    """
    if name.startswith("treeproof"):
        return structlog.get_logger(name)
    return structlog.get_logger(f"treeproof.{name}")


# Convenience functions for common logging patterns

def log_merkle_root_computation(
    logger: structlog.stdlib.BoundLogger,
    width: int,
    height: int,
    merkle_root: str,
    duration_ms: float,
    **kwargs: Any,
) -> None:
    """
    Log a Merkle tree construction.

    Args:
        logger: Logger instance
        width: Number of leaves in the tree
        height: Height of the tree
        merkle_root: Computed root hash (hex encoded)
        duration_ms: Construction duration in milliseconds
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "merkle_root_computation",
        "width": width,
        "height": height,
        "merkle_root": merkle_root,
        "duration_ms": duration_ms,
    }

    log_data.update(kwargs)

    logger.debug("merkle_root_computation", **log_data)


def log_merkle_verification(
    logger: structlog.stdlib.BoundLogger,
    target: str,
    success: bool,
    duration_ms: float,
    failure_reason: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """
    Log a Merkle verification operation.

    Args:
        logger: Logger instance
        target: What was verified ("tree", "data", "branch")
        success: Whether verification succeeded
        duration_ms: Verification duration in milliseconds
        failure_reason: Reason for failure if not successful
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "merkle_verification",
        "target": target,
        "success": success,
        "duration_ms": duration_ms,
    }

    if failure_reason is not None:
        log_data["failure_reason"] = failure_reason

    log_data.update(kwargs)

    if success:
        logger.info("merkle_verification", **log_data)
    else:
        logger.warning("merkle_verification_failed", **log_data)


def log_tree_diff(
    logger: structlog.stdlib.BoundLogger,
    width: int,
    invalid_indices: Iterable[int],
    **kwargs: Any,
) -> None:
    """
    Log the outcome of diffing two equal-shaped trees.

    Args:
        logger: Logger instance
        width: Number of leaves in each tree
        invalid_indices: Leaf indices where the trees disagree
        **kwargs: Additional context to log
    """
    indices = sorted(invalid_indices)
    log_data: Dict[str, Any] = {
        "event_type": "merkle_tree_diff",
        "width": width,
        "invalid_count": len(indices),
        "invalid_indices": indices,
    }

    log_data.update(kwargs)

    if indices:
        logger.warning("merkle_tree_diff", **log_data)
    else:
        logger.debug("merkle_tree_diff", **log_data)
