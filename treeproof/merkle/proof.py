"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Treeproof, a product of Garudex Labs

Merkle audit paths and their verification.

A MerkleProof is the ordered list of sibling hashes met on the way from a
leaf (or a branch) up to the root. Verification folds the candidate's hash
with every step, in stored order, and compares the result with the root
hash the proof was generated against.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from treeproof.exceptions import InvalidInputError
from treeproof.merkle.hashing import DEFAULT_HASHER, ContentHasher
from treeproof.merkle.node import TreeNode
from treeproof.merkle.sequence import HashSequence


@dataclass(frozen=True)
class ProofStep:
    """
    One step of an audit path.

    Attributes:
        hash: Sibling hash, or "" when the sibling does not exist
        is_left: True if the sibling is combined on the left of the working hash
    """
    hash: str
    is_left: bool

    def __post_init__(self) -> None:
        if self.hash is None:
            raise InvalidInputError("Proof step hash cannot be None")

    def __str__(self) -> str:
        return self.hash + ("L" if self.is_left else "R")


class MerkleProof:
    """
    Audit path bound to a root hash and a fixed maximum length.

    Steps are appended bottom-up by the tree's proof generation and are
    never reordered or removed. Once the proof holds max_length steps,
    add_hash refuses further steps.

    Example:
        >>> tree = MerkleTree(HashSequence(["Alice", "Bob", "Charlie"]))
        >>> proof = tree.get_merkle_proof("Charlie")
        >>> proof.prove_validity_of_data("Charlie")
        True
    """

    def __init__(self, root_hash: str, max_length: int, hasher: Optional[ContentHasher] = None):
        """
        Create an empty proof.

        Args:
            root_hash: Root hash the proof is verified against
            max_length: Maximum number of steps the proof can hold
            hasher: Digest function used to fold the steps (default: MD5 hasher)

        Raises:
            InvalidInputError: If root_hash is None or max_length is negative
        """
        if root_hash is None:
            raise InvalidInputError("The root hash of a proof cannot be None")
        if max_length < 0:
            raise InvalidInputError(f"Proof length cannot be negative, got {max_length}")

        self._root_hash = root_hash
        self._max_length = max_length
        self._hasher = hasher if hasher is not None else DEFAULT_HASHER
        self._steps: HashSequence[ProofStep] = HashSequence(hasher=self._hasher)

    @property
    def root_hash(self) -> str:
        return self._root_hash

    @property
    def max_length(self) -> int:
        return self._max_length

    @property
    def hasher(self) -> ContentHasher:
        return self._hasher

    @property
    def steps(self) -> Tuple[ProofStep, ...]:
        return tuple(self._steps)

    @property
    def is_complete(self) -> bool:
        return len(self._steps) == self._max_length

    def add_hash(self, hash: str, is_left: bool) -> bool:
        """
        Append one step to the proof.

        Args:
            hash: Sibling hash ("" for a missing sibling)
            is_left: True if the sibling goes on the left when folding

        Returns:
            True if the step was appended, False if hash is None or the
            proof already holds max_length steps
        """
        if hash is None or len(self._steps) >= self._max_length:
            return False

        self._steps.add_tail(ProofStep(hash=hash, is_left=is_left))
        return True

    def prove_validity_of_data(self, value: Any) -> bool:
        """
        Check that value is the data the proof was generated for.

        Args:
            value: Candidate data value

        Returns:
            True if folding the value's hash through the proof yields the root hash

        Raises:
            InvalidInputError: If value is None
        """
        if value is None:
            raise InvalidInputError("Cannot prove the validity of a missing value")
        return self._fold(self._hasher.hash_value(value)) == self._root_hash

    def prove_validity_of_branch(self, branch: TreeNode) -> bool:
        """
        Check that branch is the subtree the proof was generated for.

        The hash of an internal branch is first re-derived from its own
        children; a branch whose stored hash does not match its children
        fails before the proof steps are consulted.

        Args:
            branch: Candidate leaf or internal node

        Returns:
            True if the branch is consistent and folds to the root hash

        Raises:
            InvalidInputError: If branch is None
        """
        if branch is None:
            raise InvalidInputError("Cannot prove the validity of a missing branch")

        if not branch.is_leaf:
            left_hash = branch.left.hash if branch.left is not None else ""
            right_hash = branch.right.hash if branch.right is not None else ""
            if self._hasher.hash_pair(left_hash, right_hash) != branch.hash:
                return False

        return self._fold(branch.hash) == self._root_hash

    def _fold(self, initial_hash: str) -> str:
        working_hash = initial_hash
        for step in self._steps:
            if step.is_left:
                working_hash = self._hasher.hash_pair(step.hash, working_hash)
            else:
                working_hash = self._hasher.hash_pair(working_hash, step.hash)
        return working_hash

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return (
            f"MerkleProof(root_hash={self._root_hash!r}, "
            f"steps={len(self._steps)}/{self._max_length})"
        )
