"""
Arbor - authenticated Merkle tree core.

Builds a root hash over an ordered sequence of byte elements, produces
and verifies single-leaf inclusion proofs, and updates one leaf at a
time with O(log n) root recomputation.
"""

from arbor.crypto.hashing import Hasher, leaf_hash, node_hash
from arbor.merkle import (
    MerkleProof,
    MerkleTree,
    ProofStep,
    build_merkle_tree,
    generate_merkle_proof,
    update_merkle_leaf,
    verify_merkle_proof,
)
from arbor.schemas.errors import (
    ArborException,
    EmptyInputError,
    HashConfigurationError,
    IndexOutOfRangeError,
)

__version__ = "0.1.0"

__all__ = [
    "Hasher",
    "leaf_hash",
    "node_hash",
    "MerkleTree",
    "MerkleProof",
    "ProofStep",
    "build_merkle_tree",
    "generate_merkle_proof",
    "verify_merkle_proof",
    "update_merkle_leaf",
    "ArborException",
    "EmptyInputError",
    "IndexOutOfRangeError",
    "HashConfigurationError",
]
