"""
Unit tests for the hash-linked sequence.

Tests cover:
- Head and tail insertion with eager hashing
- Removal by value
- Hash snapshots
- Fail-fast iteration
"""

import pytest

from treeproof.exceptions import ConcurrentModificationError, InvalidInputError
from treeproof.merkle.hashing import ContentHasher
from treeproof.merkle.sequence import HashSequence


class TestHashSequenceInsertion:
    """Test insertion at both ends."""

    def test_empty_sequence(self):
        """Test a freshly created sequence."""
        seq = HashSequence()

        assert len(seq) == 0
        assert not seq
        assert list(seq) == []
        assert seq.all_hashes() == []

    def test_add_tail_preserves_order(self):
        """Test that tail insertion appends."""
        seq = HashSequence()
        seq.add_tail("a")
        seq.add_tail("b")
        seq.add_tail("c")

        assert list(seq) == ["a", "b", "c"]
        assert len(seq) == 3

    def test_add_head_prepends(self):
        """Test that head insertion prepends."""
        seq = HashSequence()
        seq.add_head("c")
        seq.add_head("b")
        seq.add_head("a")

        assert list(seq) == ["a", "b", "c"]

    def test_mixed_insertion(self):
        """Test interleaved head and tail insertion."""
        seq = HashSequence(["m"])
        seq.add_head("h")
        seq.add_tail("t")

        assert list(seq) == ["h", "m", "t"]

    def test_initial_values(self, names):
        """Test seeding the sequence from an iterable."""
        seq = HashSequence(names)

        assert list(seq) == names

    def test_hashes_computed_on_insertion(self, hasher):
        """Test that each element's hash matches the hasher."""
        seq = HashSequence()
        seq.add_tail("Alice")
        seq.add_head("Bob")

        assert seq.all_hashes() == [hasher.hash_value("Bob"), hasher.hash_value("Alice")]

    def test_add_none_raises(self):
        """Test that None cannot be inserted."""
        seq = HashSequence()

        with pytest.raises(InvalidInputError, match="head"):
            seq.add_head(None)

        with pytest.raises(InvalidInputError, match="tail"):
            seq.add_tail(None)

        assert len(seq) == 0
        assert seq.modification_count == 0

    def test_custom_hasher(self):
        """Test that the sequence uses the hasher it was given."""
        hasher = ContentHasher(algorithm="sha256")
        seq = HashSequence(["x"], hasher=hasher)

        assert seq.hasher is hasher
        assert seq.all_hashes() == [hasher.hash_value("x")]
        assert len(seq.all_hashes()[0]) == 64


class TestHashSequenceRemoval:
    """Test removal by value."""

    def test_remove_existing(self):
        """Test removing a value in the middle."""
        seq = HashSequence(["a", "b", "c"])

        assert seq.remove("b") is True
        assert list(seq) == ["a", "c"]

    def test_remove_head_and_tail(self):
        """Test removing the first and last values."""
        seq = HashSequence(["a", "b", "c"])

        assert seq.remove("a") is True
        assert seq.remove("c") is True
        assert list(seq) == ["b"]

        # Tail insertion still works after removing the old tail
        seq.add_tail("d")
        assert list(seq) == ["b", "d"]

    def test_remove_only_first_occurrence(self):
        """Test that duplicates are removed one at a time."""
        seq = HashSequence(["a", "b", "a"])

        assert seq.remove("a") is True
        assert list(seq) == ["b", "a"]

    def test_remove_keeps_hashes_aligned(self, hasher):
        """Test that removal drops the matching hash too."""
        seq = HashSequence(["a", "b", "c"])
        seq.remove("b")

        assert seq.all_hashes() == [hasher.hash_value("a"), hasher.hash_value("c")]

    def test_remove_missing(self):
        """Test removing a value that is not present."""
        seq = HashSequence(["a"])
        before = seq.modification_count

        assert seq.remove("z") is False
        assert seq.modification_count == before

    def test_remove_from_empty(self):
        """Test removing from an empty sequence."""
        assert HashSequence().remove("a") is False

    def test_remove_last_element(self):
        """Test that removing the only element empties the sequence."""
        seq = HashSequence(["a"])

        assert seq.remove("a") is True
        assert len(seq) == 0

        seq.add_head("b")
        assert list(seq) == ["b"]

    def test_remove_none_raises(self):
        """Test that removing None fails."""
        with pytest.raises(InvalidInputError):
            HashSequence(["a"]).remove(None)

    def test_remove_uses_value_equality(self):
        """Test that removal compares values, not identity."""
        seq = HashSequence([(1, 2), (3, 4)])

        assert seq.remove((3, 4)) is True
        assert list(seq) == [(1, 2)]


class TestHashSequenceSnapshots:
    """Test hash snapshots and textual views."""

    def test_all_hashes_is_a_snapshot(self):
        """Test that the returned list is not shared with the sequence."""
        seq = HashSequence(["a", "b"])
        hashes = seq.all_hashes()
        hashes.clear()

        assert len(seq.all_hashes()) == 2

        seq.add_tail("c")
        assert hashes == []

    def test_describe(self, hasher):
        """Test the per-element description."""
        seq = HashSequence(["a", "b"])

        expected = (
            f"Data: a, Hash: {hasher.hash_value('a')}\n"
            f"Data: b, Hash: {hasher.hash_value('b')}\n"
        )
        assert seq.describe() == expected

    def test_describe_empty(self):
        """Test that an empty sequence describes as an empty string."""
        assert HashSequence().describe() == ""

    def test_contains(self):
        """Test value membership."""
        seq = HashSequence(["a", "b"])

        assert "a" in seq
        assert "z" not in seq

    def test_repr(self):
        """Test the debug representation."""
        assert repr(HashSequence(["a"])) == "HashSequence(size=1, algorithm='md5')"


class TestHashSequenceIteration:
    """Test fail-fast iteration."""

    def test_iteration_is_restartable(self):
        """Test that each iter() starts from the head."""
        seq = HashSequence(["a", "b"])

        assert list(seq) == ["a", "b"]
        assert list(seq) == ["a", "b"]

    def test_iterator_exhausts(self):
        """Test that an iterator stops after the tail."""
        it = iter(HashSequence(["a"]))

        assert next(it) == "a"
        with pytest.raises(StopIteration):
            next(it)

    def test_modification_counter(self):
        """Test that every structural change bumps the counter."""
        seq = HashSequence()
        seq.add_tail("a")
        seq.add_head("b")
        seq.remove("a")

        assert seq.modification_count == 3

    def test_add_head_during_iteration_fails(self):
        """Test that inserting a head mid-iteration is detected."""
        seq = HashSequence(["a", "b", "c"])
        it = iter(seq)

        assert next(it) == "a"
        seq.add_head("z")

        with pytest.raises(ConcurrentModificationError, match="modified during iteration"):
            next(it)

    def test_invalidated_iterator_stays_invalid(self):
        """Test that a failed iterator never resumes."""
        seq = HashSequence(["a", "b", "c"])
        it = iter(seq)
        next(it)
        seq.add_tail("d")

        with pytest.raises(ConcurrentModificationError):
            next(it)

        with pytest.raises(ConcurrentModificationError, match="invalidated"):
            next(it)

    def test_remove_during_iteration_fails(self):
        """Test that removal mid-iteration is detected."""
        seq = HashSequence(["a", "b", "c"])

        with pytest.raises(ConcurrentModificationError):
            for value in seq:
                if value == "a":
                    seq.remove("c")

    def test_modification_before_first_step_fails(self):
        """Test that the iterator checks from its very first step."""
        seq = HashSequence(["a"])
        it = iter(seq)
        seq.add_tail("b")

        with pytest.raises(ConcurrentModificationError):
            next(it)

    def test_failed_remove_does_not_invalidate(self):
        """Test that a removal that finds nothing is not a modification."""
        seq = HashSequence(["a", "b"])
        it = iter(seq)
        next(it)
        seq.remove("z")

        assert next(it) == "b"

    def test_new_iterator_after_modification(self):
        """Test that a fresh iterator sees the new contents."""
        seq = HashSequence(["a"])
        it = iter(seq)
        seq.add_tail("b")

        with pytest.raises(ConcurrentModificationError):
            next(it)

        assert list(seq) == ["a", "b"]
