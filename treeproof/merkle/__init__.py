"""
Merkle tree implementation for tamper-evident data sets.

This module provides hash sequences, Merkle tree construction, proof
generation and verification, and tree diffing for corruption detection.
"""

from treeproof.merkle.hashing import ContentHasher, DEFAULT_HASHER
from treeproof.merkle.sequence import HashSequence
from treeproof.merkle.node import TreeNode
from treeproof.merkle.proof import MerkleProof, ProofStep
from treeproof.merkle.tree import MerkleTree, NOT_FOUND
from treeproof.merkle.verifier import MerkleVerifier, VerificationResult

__all__ = [
    "ContentHasher",
    "DEFAULT_HASHER",
    "HashSequence",
    "TreeNode",
    "MerkleProof",
    "ProofStep",
    "MerkleTree",
    "NOT_FOUND",
    "MerkleVerifier",
    "VerificationResult",
]
