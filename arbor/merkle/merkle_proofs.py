"""
Merkle Proofs Convenience Wrappers
Thin wrappers around the Merkle tree functions for a class-based API.

This module provides:
- MerkleProver: Build-and-prove in one call for callers without a tree
- MerkleVerifier: Verify proofs, including from raw sibling/direction lists

These are convenience wrappers around the functions in merkle_tree.py.
"""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from arbor.crypto.hashing import Hasher
from arbor.merkle.merkle_tree import (
    MerkleProof,
    ProofStep,
    build_merkle_tree,
    verify_merkle_proof,
)

logger = logging.getLogger(__name__)


class MerkleProver:
    """
    Convenience class for generating Merkle proofs from raw elements.

    Example:
        >>> proof = MerkleProver.prove([b"a", b"b", b"c"], index=1)
        >>> proof.leaf_index
        1
    """

    @staticmethod
    def prove(
        leaves: Iterable[bytes],
        index: int,
        hasher: Hasher | None = None,
    ) -> MerkleProof:
        """
        Build a tree over ``leaves`` and prove the element at ``index``.

        Raises:
            EmptyInputError: If leaves is empty
            IndexOutOfRangeError: If index is out of range
        """
        return build_merkle_tree(leaves, hasher=hasher).generate_proof(index)

    @staticmethod
    def prove_all(
        leaves: Iterable[bytes],
        hasher: Hasher | None = None,
    ) -> tuple[bytes, list[MerkleProof]]:
        """
        Build a tree once and prove every element.

        Returns:
            (root, proofs) with proofs[i] proving leaves[i]
        """
        tree = build_merkle_tree(leaves, hasher=hasher)
        return tree.root(), [tree.generate_proof(i) for i in range(tree.leaf_count)]

    @staticmethod
    def compute_root(leaves: Iterable[bytes], hasher: Hasher | None = None) -> bytes:
        """Root hash of ``leaves`` without keeping the tree."""
        return build_merkle_tree(leaves, hasher=hasher).root()


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> proof = MerkleProver.prove(leaves, index=1)
        >>> MerkleVerifier.verify(leaves[1], proof, root)
        True
    """

    @staticmethod
    def verify(
        leaf_data: bytes,
        proof: MerkleProof | Sequence[tuple[bytes, bool]],
        expected_root: bytes,
        hasher: Hasher | None = None,
    ) -> bool:
        """Verify ``leaf_data`` against ``expected_root``; never raises."""
        return verify_merkle_proof(leaf_data, proof, expected_root, hasher=hasher)

    @staticmethod
    def verify_leaf_in_root(
        leaf_data: bytes,
        siblings: Sequence[bytes],
        directions: Sequence[bool],
        expected_root: bytes,
        hasher: Hasher | None = None,
    ) -> bool:
        """
        Verify from raw components.

        Args:
            leaf_data: Raw element claimed to be in the tree
            siblings: Sibling hashes, bottom-up
            directions: For each sibling, True if it is the left node
            expected_root: The claimed root
            hasher: Hash configuration used by the tree

        Returns:
            True if the proof is valid. Mismatched lengths or components
            that are not iterable are a malformed proof and return False.
        """
        try:
            siblings = list(siblings)
            directions = list(directions)
        except TypeError:
            logger.debug("verify_leaf_in_root: siblings/directions not iterable")
            return False
        if len(siblings) != len(directions):
            return False
        steps = [ProofStep(s, d) for s, d in zip(siblings, directions)]
        return verify_merkle_proof(leaf_data, steps, expected_root, hasher=hasher)


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
