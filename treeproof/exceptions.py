"""
Exception hierarchy for Treeproof.

All custom exceptions inherit from TreeproofError base class.
"""


class TreeproofError(Exception):
    """Base exception for all Treeproof errors."""
    pass


# Input Errors
class InvalidInputError(TreeproofError):
    """Raised when a required argument is absent or invalid."""
    pass


class NotFoundError(InvalidInputError):
    """Raised when a value or branch is absent from the structure being queried."""
    pass


class DataNotFoundError(NotFoundError):
    """Raised when a data value has no matching leaf in the tree."""
    pass


class BranchNotFoundError(NotFoundError):
    """Raised when a branch does not belong to the tree."""
    pass


# Tree Errors
class StructuralMismatchError(InvalidInputError):
    """Raised when two trees with different width or height are compared."""
    pass


# Sequence Errors
class SequenceError(TreeproofError):
    """Base exception for hash sequence errors."""
    pass


class ConcurrentModificationError(SequenceError):
    """Raised when a sequence is structurally modified during iteration."""
    pass


# Configuration Errors
class ConfigurationError(TreeproofError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass
