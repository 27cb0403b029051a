"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Treeproof, a product of Garudex Labs

Content hashing for Merkle leaves and internal nodes.

Every hash in a tree is a fixed-length lowercase hex string produced by a
single ContentHasher:
- Leaf hash: digest of the value's canonical bytes
- Node hash: digest of the concatenated child hash strings
- A node with a single child hashes the child's hash string alone
"""

import hashlib
from typing import Any

from treeproof.config.settings import HashingConfig
from treeproof.exceptions import InvalidConfigurationError, InvalidInputError


class ContentHasher:
    """
    Deterministic, stateless digest function over bytes, values and hash pairs.

    The digest algorithm is pluggable. The default is MD5, which yields
    32-character hex strings; any fixed-length hashlib algorithm works.

    Example:
        >>> hasher = ContentHasher()
        >>> leaf = hasher.hash_value("Alice")
        >>> parent = hasher.hash_pair(leaf, hasher.hash_value("Bob"))
        >>> len(parent) == hasher.hex_length
        True
    """

    DEFAULT_ALGORITHM = "md5"
    DEFAULT_ENCODING = "utf-8"

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM, encoding: str = DEFAULT_ENCODING):
        """
        Create a hasher for the given hashlib algorithm.

        Args:
            algorithm: Name of a fixed-length hashlib algorithm
            encoding: Text encoding used for non-bytes values and hash strings

        Raises:
            InvalidConfigurationError: If the algorithm or encoding is unusable
        """
        if not isinstance(algorithm, str):
            raise InvalidConfigurationError(
                f"Digest algorithm must be a name, got {type(algorithm).__name__}"
            )
        if not isinstance(encoding, str):
            raise InvalidConfigurationError(
                f"Text encoding must be a name, got {type(encoding).__name__}"
            )
        algorithm = algorithm.lower()
        if algorithm.startswith("shake"):
            raise InvalidConfigurationError(
                f"Digest algorithm '{algorithm}' has no fixed output length"
            )
        try:
            sample = hashlib.new(algorithm)
        except ValueError:
            raise InvalidConfigurationError(f"Unknown digest algorithm '{algorithm}'")
        try:
            "".encode(encoding)
        except LookupError:
            raise InvalidConfigurationError(f"Unknown text encoding '{encoding}'")

        self._algorithm = algorithm
        self._encoding = encoding
        self._digest_size = sample.digest_size

    @classmethod
    def from_config(cls, config: HashingConfig) -> "ContentHasher":
        """Build a hasher from the hashing section of the configuration."""
        return cls(algorithm=config.algorithm, encoding=config.encoding)

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def digest_size(self) -> int:
        """Digest size in bytes."""
        return self._digest_size

    @property
    def hex_length(self) -> int:
        """Length of every hash string this hasher produces."""
        return self._digest_size * 2

    def hash_bytes(self, data: bytes) -> str:
        """
        Hash raw bytes.

        Args:
            data: Bytes to hash

        Returns:
            Hex digest of data

        Raises:
            InvalidInputError: If data is None
        """
        if data is None:
            raise InvalidInputError("Cannot hash a missing byte sequence")
        return hashlib.new(self._algorithm, bytes(data)).hexdigest()

    def hash_value(self, value: Any) -> str:
        """
        Hash a value through its canonical byte encoding.

        Bytes-like values are hashed as-is; anything else is hashed through
        its string form encoded with the configured text encoding.

        Args:
            value: Value to hash

        Returns:
            Hex digest of the value's canonical bytes

        Raises:
            InvalidInputError: If value is None
        """
        if value is None:
            raise InvalidInputError("Cannot hash a missing value")
        return self.hash_bytes(self.encode(value))

    def hash_pair(self, left: str, right: str = "") -> str:
        """
        Hash the concatenation of two hash strings.

        An absent right sibling is the empty string, so hash_pair(h) is the
        hash of a node that has only a left child.

        Args:
            left: Left hash string
            right: Right hash string (empty when the sibling is missing)

        Returns:
            Hex digest of left + right
        """
        if left is None or right is None:
            raise InvalidInputError("Cannot combine a missing hash")
        return self.hash_bytes((left + right).encode(self._encoding))

    def encode(self, value: Any) -> bytes:
        """Canonical byte encoding of a value."""
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        return str(value).encode(self._encoding)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentHasher):
            return NotImplemented
        return self._algorithm == other._algorithm and self._encoding == other._encoding

    def __hash__(self) -> int:
        return hash((self._algorithm, self._encoding))

    def __repr__(self) -> str:
        return f"ContentHasher(algorithm={self._algorithm!r}, encoding={self._encoding!r})"


DEFAULT_HASHER = ContentHasher()
