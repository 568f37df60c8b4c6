"""
Core cryptographic utilities.

Domain-separated leaf/node hashing used by the Merkle tree.
"""
from .hashing import (
    DEFAULT_HASH_ALGORITHM,
    DEFAULT_HASHER,
    LEAF_TAG,
    NODE_TAG,
    SUPPORTED_ALGORITHMS,
    Hasher,
    from_hex,
    leaf_hash,
    node_hash,
    normalize_algorithm,
    to_hex,
)

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
