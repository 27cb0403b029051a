"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Treeproof, a product of Garudex Labs

Hash-linked sequence feeding Merkle tree construction.

A HashSequence keeps an ordered list of (value, hash) pairs. The hash of
each element is computed once, when the element is inserted, and the order
of the elements is the leaf order of any tree built from the sequence.

Iteration is fail-fast: every structural change bumps a generation counter,
and an iterator that sees the counter move raises
ConcurrentModificationError and stays invalid from then on.
"""

from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Generic, Iterable, Iterator, List, Optional, TypeVar

from treeproof.exceptions import ConcurrentModificationError, InvalidInputError
from treeproof.merkle.hashing import DEFAULT_HASHER, ContentHasher

T = TypeVar("T")


@dataclass(frozen=True)
class _Entry(Generic[T]):
    value: T
    hash: str


class HashSequence(Generic[T]):
    """
    Ordered, mutable collection of values with eagerly computed hashes.

    Head and tail insertion are O(1); removal by value is a linear scan.
    The structure has no internal locking: callers sharing a sequence
    across threads must serialize access themselves.

    Example:
        >>> seq = HashSequence()
        >>> seq.add_tail("Bob")
        >>> seq.add_head("Alice")
        >>> list(seq)
        ['Alice', 'Bob']
        >>> len(seq.all_hashes())
        2
    """

    def __init__(self, values: Optional[Iterable[T]] = None, hasher: Optional[ContentHasher] = None):
        """
        Create a sequence, optionally seeded with values appended at the tail.

        Args:
            values: Initial values in head-to-tail order
            hasher: Digest function for element hashes (default: MD5 hasher)
        """
        self._hasher = hasher if hasher is not None else DEFAULT_HASHER
        self._entries: Deque[_Entry[T]] = deque()
        self._modification_count = 0

        if values is not None:
            for value in values:
                self.add_tail(value)

    @property
    def hasher(self) -> ContentHasher:
        return self._hasher

    @property
    def modification_count(self) -> int:
        """Generation counter bumped on every insert and removal."""
        return self._modification_count

    def add_head(self, value: T) -> None:
        """
        Insert a value at the head of the sequence.

        Args:
            value: Value to insert

        Raises:
            InvalidInputError: If value is None
        """
        self._entries.appendleft(self._make_entry(value, "head"))
        self._modification_count += 1

    def add_tail(self, value: T) -> None:
        """
        Insert a value at the tail of the sequence.

        Args:
            value: Value to insert

        Raises:
            InvalidInputError: If value is None
        """
        self._entries.append(self._make_entry(value, "tail"))
        self._modification_count += 1

    def remove(self, value: T) -> bool:
        """
        Remove the first element equal to value.

        Args:
            value: Value to remove (compared with ==)

        Returns:
            True if an element was removed, False if none matched

        Raises:
            InvalidInputError: If value is None
        """
        if value is None:
            raise InvalidInputError("Cannot remove a missing value from the sequence")

        for position, entry in enumerate(self._entries):
            if entry.value == value:
                del self._entries[position]
                self._modification_count += 1
                return True

        return False

    def all_hashes(self) -> List[str]:
        """Snapshot of the element hashes in head-to-tail order."""
        return [entry.hash for entry in self._entries]

    def describe(self) -> str:
        """One "Data: <value>, Hash: <hash>" line per element, head first."""
        return "".join(f"Data: {entry.value}, Hash: {entry.hash}\n" for entry in self._entries)

    def __iter__(self) -> Iterator[T]:
        return _SequenceIterator(self)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __contains__(self, value: Any) -> bool:
        return any(entry.value == value for entry in self._entries)

    def __repr__(self) -> str:
        return f"HashSequence(size={len(self._entries)}, algorithm={self._hasher.algorithm!r})"

    def _make_entry(self, value: T, position: str) -> _Entry[T]:
        if value is None:
            raise InvalidInputError(f"Cannot add a missing value at the {position} of the sequence")
        return _Entry(value=value, hash=self._hasher.hash_value(value))


class _SequenceIterator(Iterator[T]):
    """Fail-fast iterator over the values of a HashSequence."""

    def __init__(self, sequence: HashSequence[T]):
        self._sequence = sequence
        self._expected_modifications = sequence.modification_count
        self._entries = iter(sequence._entries)
        self._valid = True

    def __next__(self) -> T:
        self._ensure_valid()
        entry = next(self._entries)
        return entry.value

    def _ensure_valid(self) -> None:
        if not self._valid:
            raise ConcurrentModificationError(
                "Iterator was invalidated by an earlier modification of the sequence"
            )
        actual = self._sequence.modification_count
        if actual != self._expected_modifications:
            self._valid = False
            self._entries = iter(())
            raise ConcurrentModificationError(
                f"Sequence was modified during iteration: expected "
                f"{self._expected_modifications} modifications, found {actual}"
            )
