"""
Pytest configuration and shared fixtures for Treeproof tests.
"""

import os
import tempfile
from pathlib import Path
from typing import Generator, Iterator, List, Optional, Tuple

import pytest

from treeproof.merkle.hashing import ContentHasher
from treeproof.merkle.node import TreeNode
from treeproof.merkle.sequence import HashSequence
from treeproof.merkle.tree import MerkleTree


def walk_tree(node: Optional[TreeNode], depth: int = 0) -> Iterator[Tuple[TreeNode, int]]:
    """
    Yield every node of a tree with its distance from the root.

    Args:
        node: Subtree root
        depth: Distance of node from the tree root

    Yields:
        (node, depth) pairs in pre-order
    """
    if node is None:
        return
    yield node, depth
    yield from walk_tree(node.left, depth + 1)
    yield from walk_tree(node.right, depth + 1)


def make_values(count: int, prefix: str = "item") -> List[str]:
    """Distinct string values item0, item1, ..."""
    return [f"{prefix}{i}" for i in range(count)]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.
    
    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def hasher() -> ContentHasher:
    """Default MD5 content hasher."""
    return ContentHasher()


@pytest.fixture
def names() -> List[str]:
    return ["Alice", "Bob", "Charlie"]


@pytest.fixture
def names_sequence(names: List[str]) -> HashSequence:
    """Sequence of Alice, Bob, Charlie in that order."""
    return HashSequence(names)


@pytest.fixture
def names_tree(names_sequence: HashSequence) -> MerkleTree:
    """Width-3 tree over Alice, Bob, Charlie."""
    return MerkleTree(names_sequence)


@pytest.fixture
def walk():
    """The walk_tree helper, for tests that inspect tree structure."""
    return walk_tree


@pytest.fixture
def values_factory():
    """The make_values helper."""
    return make_values


# Hypothesis settings for property-based tests
from hypothesis import settings, Verbosity

# Register custom profile for Treeproof tests
settings.register_profile("treeproof", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("treeproof-ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("treeproof-dev", max_examples=10, verbosity=Verbosity.verbose)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "treeproof"))
