"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Treeproof, a product of Garudex Labs

Treeproof - Tamper-evident verification of ordered data with Merkle trees

Treeproof builds binary hash trees over hash-linked sequences and produces
logarithmic-size audit proofs for single items or contiguous blocks of items.
"""

from treeproof._version import __version__
from treeproof.merkle import (
    ContentHasher,
    HashSequence,
    MerkleProof,
    MerkleTree,
    MerkleVerifier,
    ProofStep,
    TreeNode,
)

__all__ = [
    "__version__",
    "ContentHasher",
    "HashSequence",
    "MerkleProof",
    "MerkleTree",
    "MerkleVerifier",
    "ProofStep",
    "TreeNode",
]
