"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Treeproof, a product of Garudex Labs

Version lookup for the treeproof distribution.
"""

from importlib import metadata
from pathlib import Path

_VERSION_FILE = Path(__file__).parent.parent / "VERSION"


def get_version() -> str:
    """
    Resolve the package version.

    A source checkout carries a VERSION file next to the package and that
    file wins; an installed wheel falls back to the distribution metadata.

    Returns:
        str: The version string, or "unknown" when neither source exists
    """
    if _VERSION_FILE.exists():
        return _VERSION_FILE.read_text().strip()
    try:
        return metadata.version("treeproof")
    except metadata.PackageNotFoundError:
        return "unknown"


__version__ = get_version()
