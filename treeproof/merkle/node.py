"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Treeproof, a product of Garudex Labs

Immutable Merkle tree nodes.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from treeproof.exceptions import InvalidInputError


@dataclass(frozen=True, eq=False)
class TreeNode:
    """
    Node of a Merkle tree.

    A node without children is a leaf and carries the hash of one input
    value. An internal node owns a left child and, unless it was promoted
    from an odd trailing element, a right child.

    Nodes compare and hash by identity: two nodes with equal hashes at
    different positions are different nodes.

    Attributes:
        hash: Hex hash of the node
        left: Left child (None for leaves)
        right: Right child (None for leaves and single-child nodes)
        leaf_count: Number of leaves in the subtree rooted here
    """
    hash: str
    left: Optional["TreeNode"] = None
    right: Optional["TreeNode"] = None
    leaf_count: int = 1

    def __post_init__(self) -> None:
        if self.hash is None:
            raise InvalidInputError("Tree node hash cannot be None")
        if self.left is None and self.right is not None:
            raise InvalidInputError("Tree node cannot have a right child without a left child")

    @classmethod
    def leaf(cls, hash: str) -> "TreeNode":
        return cls(hash=hash)

    @classmethod
    def internal(cls, hash: str, left: "TreeNode", right: Optional["TreeNode"] = None) -> "TreeNode":
        """Create an internal node; its leaf count is the sum of its children's."""
        if left is None:
            raise InvalidInputError("Internal node requires a left child")
        leaf_count = left.leaf_count + (right.leaf_count if right is not None else 0)
        return cls(hash=hash, left=left, right=right, leaf_count=leaf_count)

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def children(self) -> Iterator["TreeNode"]:
        if self.left is not None:
            yield self.left
        if self.right is not None:
            yield self.right

    def __repr__(self) -> str:
        kind = "leaf" if self.is_leaf else "internal"
        return f"TreeNode({kind}, hash={self.hash!r}, leaves={self.leaf_count})"
