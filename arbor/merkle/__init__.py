"""
Merkle Tree and Commitments
Deterministic Merkle tree construction, inclusion proofs and updates.

This module provides:
- MerkleTree: tree over ordered byte elements, with in-place update_leaf
- MerkleProof / ProofStep: bottom-up sibling path for one leaf
- build_merkle_tree: Build a tree from raw elements
- generate_merkle_proof: Prove one leaf
- verify_merkle_proof: Check a proof against a claimed root (stateless)
- update_merkle_leaf: Replace one leaf and return the new root

Commitment Rules:
1. Leaf hashing: H(0x00 || data)
2. Parent hashing: H(0x01 || left || right)
3. Odd rule: promote the unpaired node unchanged (no duplication)
4. Empty input: EmptyInputError
5. Single leaf: root = leaf hash

Usage:
    from arbor.merkle import build_merkle_tree, verify_merkle_proof

    tree = build_merkle_tree([b"a", b"b", b"c"])
    proof = tree.generate_proof(2)
    assert verify_merkle_proof(b"c", proof, tree.root())

    new_root = tree.update_leaf(2, b"z")
"""
from .locking import ReadWriteLock
from .merkle_tree import (
    MerkleProof,
    MerkleTree,
    ProofStep,
    build_merkle_tree,
    compute_tree_height,
    generate_merkle_proof,
    update_merkle_leaf,
    verify_merkle_proof,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "MerkleTree",
    "MerkleProof",
    "ProofStep",
    "ReadWriteLock",
    # Core functions
    "build_merkle_tree",
    "generate_merkle_proof",
    "verify_merkle_proof",
    "update_merkle_leaf",
    "compute_tree_height",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
