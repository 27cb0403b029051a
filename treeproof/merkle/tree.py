"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Treeproof, a product of Garudex Labs

Merkle tree implementation for tamper-evident data sets.

This module implements a binary Merkle tree built from the hashes of a
HashSequence. It supports:
- Level-synchronous tree construction with odd-node promotion
- Membership checks for data, branches and whole trees
- Absolute and branch-relative leaf index lookup
- Diffing two equal-shaped trees down to the corrupted leaf indices
- Merkle proof generation for a data value or a branch
"""

import time
from typing import Dict, Generic, Iterable, Iterator, List, Optional, Set, Tuple, TypeVar

from treeproof.config.settings import TreeConfig
from treeproof.exceptions import (
    BranchNotFoundError,
    DataNotFoundError,
    InvalidInputError,
    StructuralMismatchError,
)
from treeproof.logging_config import get_logger, log_merkle_root_computation, log_tree_diff
from treeproof.merkle.hashing import ContentHasher
from treeproof.merkle.node import TreeNode
from treeproof.merkle.proof import MerkleProof
from treeproof.merkle.sequence import HashSequence

logger = get_logger(__name__)

T = TypeVar("T")

# Returned by index lookups when the data has no matching leaf
NOT_FOUND = -1


class MerkleTree(Generic[T]):
    """
    Immutable binary Merkle tree over the hashes of a HashSequence.

    The tree is built bottom-up, one level at a time. Adjacent nodes are
    paired left to right; an odd trailing node is not duplicated but
    promoted under a parent with a single child, whose hash is the hash of
    the child's hash alone. All leaves therefore sit at the same depth.

    Auxiliary lookups are computed once during construction:
    - hash -> leaf indices (duplicate values map to several indices)
    - set of every hash in the tree, leaves and internal nodes
    - per-node leaf counts, stored on the nodes themselves

    Example:
        >>> seq = HashSequence(["Alice", "Bob", "Charlie"])
        >>> tree = MerkleTree(seq)
        >>> tree.get_width(), tree.get_height()
        (3, 2)
        >>> tree.get_index_of_data("Bob")
        1
        >>> tree.get_merkle_proof("Charlie").prove_validity_of_data("Charlie")
        True
    """

    def __init__(self, sequence: HashSequence[T], strict_branch_validation: bool = False):
        """
        Build a Merkle tree from the hashes of a sequence.

        Args:
            sequence: Source sequence; its hasher becomes the tree's hasher
            strict_branch_validation: If True, branch validation also checks
                that the branch has the shape of the node found in the tree

        Raises:
            InvalidInputError: If the sequence is None or empty
        """
        if sequence is None or len(sequence) == 0:
            raise InvalidInputError("Cannot build a Merkle tree from a missing or empty sequence")

        start_time = time.perf_counter()

        self._hasher = sequence.hasher
        self._strict_branch_validation = strict_branch_validation
        self._hash_index_map: Dict[str, List[int]] = {}
        self._all_hashes: Set[str] = set()

        hashes = sequence.all_hashes()
        self._root = self._generate_tree(hashes)
        self._width = len(hashes)
        self._height = self._determine_height(self._root)

        log_merkle_root_computation(
            logger,
            width=self._width,
            height=self._height,
            merkle_root=self._root.hash,
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )

    @classmethod
    def from_values(
        cls,
        values: Iterable[T],
        hasher: Optional[ContentHasher] = None,
        strict_branch_validation: bool = False,
    ) -> "MerkleTree[T]":
        """Build a tree from values, in order, through a fresh HashSequence."""
        return cls(HashSequence(values, hasher=hasher), strict_branch_validation=strict_branch_validation)

    @classmethod
    def from_config(cls, sequence: HashSequence[T], config: TreeConfig) -> "MerkleTree[T]":
        """Build a tree using the tree section of the configuration."""
        return cls(sequence, strict_branch_validation=config.strict_branch_validation)

    def get_root(self) -> TreeNode:
        return self._root

    def get_width(self) -> int:
        """Number of leaves."""
        return self._width

    def get_height(self) -> int:
        """Number of edges on the longest root-to-leaf path."""
        return self._height

    @property
    def root_hash(self) -> str:
        return self._root.hash

    @property
    def hasher(self) -> ContentHasher:
        return self._hasher

    def __len__(self) -> int:
        return self._width

    def validate_data(self, value: Optional[T]) -> bool:
        """
        Check whether a data value is one of the tree's leaves.

        Args:
            value: Data value to look up

        Returns:
            True if the value's hash is a leaf hash, False otherwise or if value is None
        """
        if value is None:
            return False
        return self._hasher.hash_value(value) in self._hash_index_map

    def validate_branch(self, branch: Optional[TreeNode]) -> bool:
        """
        Check whether a branch belongs to the tree.

        By default only hash membership is checked, so a node from another
        tree with the same hash passes. With strict branch validation the
        node found in the tree must also have the branch's shape: both are
        leaves, or both are internal with the same child hashes.

        Args:
            branch: Node to look up

        Returns:
            True if the branch is part of the tree, False otherwise or if branch is None
        """
        if branch is None:
            return False
        if branch.hash not in self._all_hashes:
            return False
        if not self._strict_branch_validation:
            return True

        located = self._locate(branch)
        return located is not None and self._same_shape(located[0], branch)

    def validate_tree(self, other_tree: "MerkleTree[T]") -> bool:
        """
        Check whether another tree commits to the same data set.

        Args:
            other_tree: Tree to compare with

        Returns:
            True if both root hashes are equal

        Raises:
            InvalidInputError: If other_tree is None
        """
        if other_tree is None:
            raise InvalidInputError("The tree to validate cannot be None")
        return self._root.hash == other_tree.get_root().hash

    def get_index_of_data(self, value: T, branch: Optional[TreeNode] = None) -> int:
        """
        Find the leaf index of a data value.

        Without a branch the index is absolute (first occurrence). With a
        branch the index is the offset within that branch's leaf range.

        Args:
            value: Data value to look up
            branch: Optional branch of this tree to search within

        Returns:
            Leaf index, or NOT_FOUND if no leaf matches

        Raises:
            InvalidInputError: If value is None
            BranchNotFoundError: If branch does not belong to this tree
        """
        if value is None:
            raise InvalidInputError("The data to look up cannot be None")

        reference_hash = self._hasher.hash_value(value)

        if branch is None:
            indices = self._hash_index_map.get(reference_hash)
            return indices[0] if indices else NOT_FOUND

        if not self.validate_branch(branch):
            raise BranchNotFoundError("The branch is not part of this tree")

        if reference_hash not in self._hash_index_map:
            return NOT_FOUND
        return self._index_in_branch(branch, reference_hash, 0)

    def leaf_indices(self, value: T) -> List[int]:
        """Every leaf index holding value, in ascending order."""
        if value is None:
            raise InvalidInputError("The data to look up cannot be None")
        return list(self._hash_index_map.get(self._hasher.hash_value(value), []))

    def find_invalid_data_indices(self, other_tree: "MerkleTree[T]") -> Set[int]:
        """
        Find the leaf indices where another tree of the same shape differs.

        Both trees are descended together; subtrees whose hashes match are
        skipped entirely, so the cost grows with the number of corrupted
        leaves rather than with the tree width.

        Args:
            other_tree: Tree with the same width and height

        Returns:
            Set of leaf indices whose hashes differ

        Raises:
            InvalidInputError: If other_tree is None
            StructuralMismatchError: If the trees differ in width or height
        """
        if other_tree is None:
            raise InvalidInputError("The tree to compare cannot be None")
        if other_tree.get_width() != self._width or other_tree.get_height() != self._height:
            raise StructuralMismatchError(
                f"Cannot diff trees of different shape: "
                f"width {self._width} vs {other_tree.get_width()}, "
                f"height {self._height} vs {other_tree.get_height()}"
            )

        invalid_indices: Set[int] = set()
        self._collect_invalid_indices(
            self._root, other_tree.get_root(), 0, self._width - 1, invalid_indices
        )

        log_tree_diff(logger, width=self._width, invalid_indices=invalid_indices)
        return invalid_indices

    def get_merkle_proof(self, value: T) -> MerkleProof:
        """
        Generate the proof that a data value belongs to the tree.

        The proof targets the first leaf holding the value and has one
        step per level, so its length equals the tree height.

        Args:
            value: Data value to prove

        Returns:
            MerkleProof bound to this tree's root hash

        Raises:
            InvalidInputError: If value is None
            DataNotFoundError: If no leaf holds the value
        """
        if value is None:
            raise InvalidInputError("The data to prove cannot be None")

        reference_hash = self._hasher.hash_value(value)
        indices = self._hash_index_map.get(reference_hash)
        if not indices:
            logger.warning(
                "merkle_proof_target_missing", target="data", target_hash=reference_hash
            )
            raise DataNotFoundError("The data is not present in the tree")

        proof = MerkleProof(self._root.hash, self._height, hasher=self._hasher)
        self._append_path_to_leaf(self._root, indices[0], proof)
        return proof

    def get_merkle_proof_of_branch(self, branch: TreeNode) -> MerkleProof:
        """
        Generate the proof that a branch belongs to the tree.

        The proof's maximum length is the tree height minus the branch's
        own height, i.e. one step per ancestor of the branch.

        Args:
            branch: Node of this tree (matched by identity, else by hash)

        Returns:
            MerkleProof bound to this tree's root hash

        Raises:
            InvalidInputError: If branch is None
            BranchNotFoundError: If the branch is not part of the tree
        """
        if branch is None:
            raise InvalidInputError("The branch to prove cannot be None")

        located = self._locate(branch) if self.validate_branch(branch) else None
        if located is None:
            logger.warning(
                "merkle_proof_target_missing", target="branch", target_hash=branch.hash
            )
            raise BranchNotFoundError("The branch is not part of this tree")

        node, depth = located
        branch_height = self._determine_height(node)
        proof = MerkleProof(self._root.hash, self._height - branch_height, hasher=self._hasher)
        self._append_path_to_node(self._root, node, proof)

        logger.debug(f"Generated branch proof with {len(proof)} steps at depth {depth}")
        return proof

    def verify_integrity(self) -> bool:
        """Re-derive every internal hash from its children and check consistency."""
        for node, _ in self._iter_nodes(self._root):
            if node.is_leaf:
                continue
            right_hash = node.right.hash if node.right is not None else ""
            if self._hasher.hash_pair(node.left.hash, right_hash) != node.hash:
                logger.error("merkle_integrity_violation", node_hash=node.hash)
                return False
        return True

    def _generate_tree(self, hashes: List[str]) -> TreeNode:
        """
        Build the tree bottom-up and fill the lookup tables.

        Args:
            hashes: Leaf hashes in sequence order

        Returns:
            Root node
        """
        current_level: List[TreeNode] = []
        for index, leaf_hash in enumerate(hashes):
            current_level.append(TreeNode.leaf(leaf_hash))
            self._all_hashes.add(leaf_hash)
            self._hash_index_map.setdefault(leaf_hash, []).append(index)

        while len(current_level) > 1:
            next_level: List[TreeNode] = []

            for i in range(0, len(current_level), 2):
                left = current_level[i]
                # Odd trailing node is promoted without a sibling
                right = current_level[i + 1] if i + 1 < len(current_level) else None

                combined_hash = self._hasher.hash_pair(
                    left.hash, right.hash if right is not None else ""
                )
                next_level.append(TreeNode.internal(combined_hash, left, right))
                self._all_hashes.add(combined_hash)

            current_level = next_level

        return current_level[0]

    def _determine_height(self, node: Optional[TreeNode]) -> int:
        if node is None:
            return -1
        return 1 + max(self._determine_height(node.left), self._determine_height(node.right))

    def _iter_nodes(self, root: TreeNode) -> Iterator[Tuple[TreeNode, int]]:
        """Pre-order walk yielding (node, depth), left subtree first."""
        stack: List[Tuple[TreeNode, int]] = [(root, 0)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            if node.right is not None:
                stack.append((node.right, depth + 1))
            if node.left is not None:
                stack.append((node.left, depth + 1))

    def _locate(self, branch: TreeNode) -> Optional[Tuple[TreeNode, int]]:
        """
        Find the tree node standing for branch.

        The branch object itself wins if it is part of the tree; otherwise
        the first node in pre-order with the same hash is used.

        Returns:
            (node, depth from root), or None if no node matches
        """
        first_match: Optional[Tuple[TreeNode, int]] = None
        for node, depth in self._iter_nodes(self._root):
            if node is branch:
                return node, depth
            if first_match is None and node.hash == branch.hash:
                first_match = (node, depth)
        return first_match

    @staticmethod
    def _same_shape(node: TreeNode, branch: TreeNode) -> bool:
        if node.is_leaf or branch.is_leaf:
            return node.is_leaf and branch.is_leaf

        def child_hashes(n: TreeNode) -> Tuple[str, Optional[str]]:
            return n.left.hash, n.right.hash if n.right is not None else None

        return child_hashes(node) == child_hashes(branch)

    def _index_in_branch(self, node: Optional[TreeNode], target_hash: str, offset: int) -> int:
        """
        Depth-first search of the branch's leaves, left to right.

        A branch carries no absolute leaf offset, so the walk visits the
        branch's subtree until the first match. The cost grows with the
        branch size, not with its depth; get_index_of_data only gets here
        after the hash map confirms the value is a leaf somewhere.
        Leaf counts turn each right turn into an offset without counting.
        """
        if node is None:
            return NOT_FOUND
        if node.is_leaf:
            return offset if node.hash == target_hash else NOT_FOUND

        left_result = self._index_in_branch(node.left, target_hash, offset)
        if left_result != NOT_FOUND:
            return left_result

        return self._index_in_branch(node.right, target_hash, offset + node.left.leaf_count)

    def _collect_invalid_indices(
        self,
        node1: Optional[TreeNode],
        node2: Optional[TreeNode],
        start: int,
        end: int,
        invalid_indices: Set[int],
    ) -> None:
        if node1 is None or node2 is None or start > end:
            return

        # Matching hashes guarantee identical subtrees
        if node1.hash == node2.hash:
            return

        if node1.is_leaf:
            invalid_indices.add(start)
            return

        central_point = start + node1.left.leaf_count - 1
        self._collect_invalid_indices(node1.left, node2.left, start, central_point, invalid_indices)
        self._collect_invalid_indices(node1.right, node2.right, central_point + 1, end, invalid_indices)

    def _append_path_to_leaf(self, node: TreeNode, index: int, proof: MerkleProof) -> None:
        """Descend to the leaf at index, appending sibling steps on the way back up."""
        if node.is_leaf:
            return

        left_count = node.left.leaf_count
        if index < left_count:
            self._append_path_to_leaf(node.left, index, proof)
            proof.add_hash(node.right.hash if node.right is not None else "", False)
        else:
            self._append_path_to_leaf(node.right, index - left_count, proof)
            proof.add_hash(node.left.hash, True)

    def _append_path_to_node(self, node: Optional[TreeNode], target: TreeNode, proof: MerkleProof) -> bool:
        """Search for target by identity, appending sibling steps on the way back up."""
        if node is None:
            return False
        if node is target:
            return True

        if self._append_path_to_node(node.left, target, proof):
            proof.add_hash(node.right.hash if node.right is not None else "", False)
            return True

        if self._append_path_to_node(node.right, target, proof):
            proof.add_hash(node.left.hash if node.left is not None else "", True)
            return True

        return False
