"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Treeproof, a product of Garudex Labs

Merkle verifier for data set integrity checks.

This module wraps tree and proof checks into auditable results:
- Tree verification: compare a candidate tree with a reference tree and
  pinpoint the corrupted leaves when the shapes match
- Data and branch verification: run a previously generated proof
"""

import time
from dataclasses import dataclass, field
from typing import Any, Optional, Set

from treeproof.exceptions import InvalidInputError
from treeproof.logging_config import get_logger, log_merkle_verification
from treeproof.merkle.node import TreeNode
from treeproof.merkle.proof import MerkleProof
from treeproof.merkle.tree import MerkleTree

logger = get_logger(__name__)


@dataclass
class VerificationResult:
    """
    Result of verifying a candidate tree against a reference tree.

    Attributes:
        verified: True if both trees have the same root hash
        expected_root: Root hash of the reference tree
        computed_root: Root hash of the candidate tree
        invalid_indices: Leaf indices that differ (only when shapes match)
        error_message: Error message if verification failed
    """
    verified: bool
    expected_root: str
    computed_root: str
    invalid_indices: Set[int] = field(default_factory=set)
    error_message: Optional[str] = None


class MerkleVerifier:
    """
    Verify data sets and proofs against trusted Merkle roots.

    Example:
        >>> verifier = MerkleVerifier()
        >>> result = verifier.verify_tree(reference_tree, candidate_tree)
        >>> if not result.verified:
        ...     print(f"Corrupted leaves: {sorted(result.invalid_indices)}")
    """

    def verify_tree(self, reference: MerkleTree, candidate: MerkleTree) -> VerificationResult:
        """
        Verify a candidate tree against a reference tree.

        Args:
            reference: Trusted tree
            candidate: Tree to check

        Returns:
            VerificationResult with the differing leaf indices when the
            trees have the same shape, or an error message when their shapes
            or hashers differ

        Raises:
            InvalidInputError: If either tree is None
        """
        if reference is None or candidate is None:
            raise InvalidInputError("Both trees are required for verification")

        start_time = time.perf_counter()

        expected_root = reference.root_hash
        computed_root = candidate.root_hash

        if reference.hasher != candidate.hasher:
            result = VerificationResult(
                verified=False,
                expected_root=expected_root,
                computed_root=computed_root,
                error_message=(
                    f"Hasher mismatch: expected {reference.hasher!r}, "
                    f"got {candidate.hasher!r}"
                ),
            )
        elif reference.validate_tree(candidate):
            result = VerificationResult(
                verified=True,
                expected_root=expected_root,
                computed_root=computed_root,
            )
        elif (
            reference.get_width() != candidate.get_width()
            or reference.get_height() != candidate.get_height()
        ):
            result = VerificationResult(
                verified=False,
                expected_root=expected_root,
                computed_root=computed_root,
                error_message=(
                    f"Tree shape mismatch: expected width {reference.get_width()}, "
                    f"got {candidate.get_width()}"
                ),
            )
        else:
            invalid_indices = reference.find_invalid_data_indices(candidate)
            result = VerificationResult(
                verified=False,
                expected_root=expected_root,
                computed_root=computed_root,
                invalid_indices=invalid_indices,
                error_message=f"{len(invalid_indices)} leaves differ from the reference",
            )

        log_merkle_verification(
            logger,
            target="tree",
            success=result.verified,
            duration_ms=(time.perf_counter() - start_time) * 1000,
            failure_reason=result.error_message,
            expected_root=expected_root,
            computed_root=computed_root,
        )
        return result

    def verify_data(self, proof: MerkleProof, value: Any) -> bool:
        """
        Verify that a data value is covered by a proof.

        Args:
            proof: Proof generated for the value
            value: Candidate data value

        Returns:
            True if the proof folds the value's hash to the proof's root hash
        """
        if proof is None:
            raise InvalidInputError("A proof is required for verification")

        start_time = time.perf_counter()
        success = proof.prove_validity_of_data(value)

        log_merkle_verification(
            logger,
            target="data",
            success=success,
            duration_ms=(time.perf_counter() - start_time) * 1000,
            failure_reason=None if success else "Recomputed root does not match",
            root_hash=proof.root_hash,
            proof_length=len(proof),
        )
        return success

    def verify_branch(self, proof: MerkleProof, branch: TreeNode) -> bool:
        """
        Verify that a branch is covered by a proof.

        Args:
            proof: Proof generated for the branch
            branch: Candidate branch

        Returns:
            True if the branch is internally consistent and folds to the root hash
        """
        if proof is None:
            raise InvalidInputError("A proof is required for verification")

        start_time = time.perf_counter()
        success = proof.prove_validity_of_branch(branch)

        log_merkle_verification(
            logger,
            target="branch",
            success=success,
            duration_ms=(time.perf_counter() - start_time) * 1000,
            failure_reason=None if success else "Branch hash or recomputed root does not match",
            root_hash=proof.root_hash,
            proof_length=len(proof),
        )
        return success
