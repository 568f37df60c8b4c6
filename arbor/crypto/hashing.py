"""
Hashing Utilities
Domain-separated leaf/node hashing for Merkle commitments.

This module provides:
- Hasher: a configured hash function with distinct leaf and node tags
- leaf_hash / node_hash with the default SHA-256 hasher
- Hex encoding/decoding with 0x prefix (for logs and tests)

Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = H(LEAF_TAG || data)
2. Node hashing: node = H(NODE_TAG || left || right), order preserved
3. Default: H = SHA-256, LEAF_TAG = 0x00, NODE_TAG = 0x01 (RFC 6962)

Security Notes:
- Tags are always applied; there is no untagged mode. Without them an
  internal node hash could be presented as a leaf hash during verification.
- Only fixed-output cryptographic hash functions are accepted.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass

from arbor.schemas.errors import HashConfigurationError


DEFAULT_HASH_ALGORITHM = "sha256"
LEAF_TAG: bytes = b"\x00"
NODE_TAG: bytes = b"\x01"

# Fixed-output algorithms guaranteed by hashlib on every platform.
SUPPORTED_ALGORITHMS: frozenset[str] = frozenset({
    "sha224",
    "sha256",
    "sha384",
    "sha512",
    "sha3_224",
    "sha3_256",
    "sha3_384",
    "sha3_512",
    "blake2b",
    "blake2s",
})


def normalize_algorithm(name: str) -> str:
    """
    Normalize an algorithm name to its hashlib spelling.

    ``"SHA-256"`` -> ``"sha256"``, ``"SHA3-256"`` -> ``"sha3_256"``.
    """
    name = name.strip().lower().replace("-", "_")
    # sha2 names carry no separator in hashlib: sha_256 -> sha256
    if name.startswith("sha_"):
        name = "sha" + name[len("sha_"):]
    return name


@dataclass(frozen=True)
class Hasher:
    """
    A domain-separated hash function for leaves and internal nodes.

    Two hashers are equal when they would produce identical hashes, so a
    tree and a verifier agree exactly when their hashers compare equal.

    Attributes:
        algorithm: hashlib algorithm name (see SUPPORTED_ALGORITHMS)
        leaf_tag: Bytes prepended to raw leaf data
        node_tag: Bytes prepended to a (left, right) child pair

    Example:
        >>> hasher = Hasher()
        >>> hasher.leaf_hash(b"a") != hasher.node_hash(b"", b"a")
        True
    """
    algorithm: str = DEFAULT_HASH_ALGORITHM
    leaf_tag: bytes = LEAF_TAG
    node_tag: bytes = NODE_TAG

    def __post_init__(self) -> None:
        """Validate the algorithm and tags."""
        if not isinstance(self.algorithm, str):
            raise HashConfigurationError(
                f"Hash algorithm must be a string, got {type(self.algorithm).__name__}"
            )
        algorithm = normalize_algorithm(self.algorithm)
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise HashConfigurationError(
                f"Unsupported hash algorithm: {self.algorithm!r} "
                f"(expected one of {', '.join(sorted(SUPPORTED_ALGORITHMS))})",
                algorithm=self.algorithm,
            )
        object.__setattr__(self, "algorithm", algorithm)

        for name in ("leaf_tag", "node_tag"):
            tag = getattr(self, name)
            if not isinstance(tag, (bytes, bytearray)) or len(tag) == 0:
                raise HashConfigurationError(
                    f"{name} must be non-empty bytes",
                    algorithm=algorithm,
                    details={"tag": name},
                )
            object.__setattr__(self, name, bytes(tag))

        # Distinct tags of equal length: neither is a prefix of the other, so
        # leaf_tag || data can never line up with node_tag || left || right.
        if len(self.leaf_tag) != len(self.node_tag):
            raise HashConfigurationError(
                "leaf_tag and node_tag must have the same length for domain separation",
                algorithm=algorithm,
                details={
                    "leaf_tag": self.leaf_tag.hex(),
                    "node_tag": self.node_tag.hex(),
                },
            )
        if self.leaf_tag == self.node_tag:
            raise HashConfigurationError(
                "leaf_tag and node_tag must differ for domain separation",
                algorithm=algorithm,
                details={"tag": self.leaf_tag.hex()},
            )

    @property
    def digest_size(self) -> int:
        """Size in bytes of every hash this hasher produces."""
        return hashlib.new(self.algorithm).digest_size

    def leaf_hash(self, data: bytes) -> bytes:
        """
        Hash raw leaf data: H(leaf_tag || data).

        Args:
            data: Raw leaf bytes

        Returns:
            Leaf hash (digest_size bytes)
        """
        h = hashlib.new(self.algorithm)
        h.update(self.leaf_tag)
        h.update(data)
        return h.digest()

    def node_hash(self, left: bytes, right: bytes) -> bytes:
        """
        Hash an ordered pair of child hashes: H(node_tag || left || right).

        Args:
            left: Left child hash
            right: Right child hash

        Returns:
            Internal node hash (digest_size bytes)
        """
        h = hashlib.new(self.algorithm)
        h.update(self.node_tag)
        h.update(left)
        h.update(right)
        return h.digest()


DEFAULT_HASHER = Hasher()


def leaf_hash(data: bytes) -> bytes:
    """Leaf hash with the default SHA-256 hasher."""
    return DEFAULT_HASHER.leaf_hash(data)


def node_hash(left: bytes, right: bytes) -> bytes:
    """Internal node hash with the default SHA-256 hasher."""
    return DEFAULT_HASHER.node_hash(left, right)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "DEFAULT_HASH_ALGORITHM",
    "DEFAULT_HASHER",
    "LEAF_TAG",
    "NODE_TAG",
    "SUPPORTED_ALGORITHMS",
    "Hasher",
    "normalize_algorithm",
    "leaf_hash",
    "node_hash",
    "to_hex",
    "from_hex",
]
