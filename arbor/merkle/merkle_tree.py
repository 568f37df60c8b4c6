"""
Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, verification
and single-leaf update.

This module provides:
- MerkleTree: level-array tree over an ordered sequence of byte elements
- MerkleProof / ProofStep: bottom-up sibling path for one leaf
- build_merkle_tree, generate_merkle_proof, verify_merkle_proof,
  update_merkle_leaf: functional entry points

Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = H(0x00 || data)
2. Parent hashing: parent = H(0x01 || left || right)
3. Odd rule: an unpaired trailing node is promoted to the next level
   unchanged. It is never duplicated and never hashed alone.
4. Empty input: rejected with EmptyInputError (no empty-tree root)
5. Single leaf: root = leaf hash, height 0, empty proof

Layout:
    levels[0] holds the leaf hashes, levels[-1] == [root]. The sibling of
    node i on a level is i ^ 1 (absent for a promoted node) and its parent
    is i // 2 on the level above.

Determinism Notes:
- No randomness or non-deterministic ordering
- This module never sorts leaves - it trusts input order
"""
from __future__ import annotations

import hmac
import logging
import operator
from dataclasses import dataclass
from typing import Any, Iterable, NamedTuple, Sequence

from arbor.crypto.hashing import DEFAULT_HASHER, Hasher, to_hex
from arbor.merkle.locking import ReadWriteLock
from arbor.schemas.errors import EmptyInputError, IndexOutOfRangeError

logger = logging.getLogger(__name__)


class ProofStep(NamedTuple):
    """One level of an inclusion proof."""
    sibling_hash: bytes
    sibling_is_left: bool


@dataclass(frozen=True)
class MerkleProof:
    """
    An inclusion proof for a single leaf.

    The proof lists the sibling hash at every level where the path node
    has a sibling, from the leaf upward. Levels where the node was
    promoted unchanged contribute no step, so a proof can be shorter
    than the tree height.

    Attributes:
        steps: Sibling hashes with their side, bottom-up
        leaf_index: Index of the proven leaf
        leaf_count: Number of leaves in the tree the proof came from

    ``leaf_index`` and ``leaf_count`` are informational; verification
    only uses the steps. Iterating a proof yields ``(sibling_hash,
    sibling_is_left)`` pairs.
    """
    steps: tuple[ProofStep, ...]
    leaf_index: int
    leaf_count: int

    def __post_init__(self) -> None:
        """Normalize steps and validate proof structure."""
        object.__setattr__(
            self,
            "steps",
            tuple(ProofStep(bytes(h), bool(left)) for h, left in self.steps),
        )
        if self.leaf_index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.leaf_index}")
        if self.leaf_index >= self.leaf_count:
            raise ValueError(
                f"Leaf index {self.leaf_index} out of range for {self.leaf_count} leaves"
            )

    def __iter__(self):
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __getitem__(self, item):
        return self.steps[item]

    @property
    def siblings(self) -> list[bytes]:
        """Sibling hashes, bottom-up."""
        return [step.sibling_hash for step in self.steps]

    @property
    def directions(self) -> list[bool]:
        """For each sibling, whether it sits to the left of the path node."""
        return [step.sibling_is_left for step in self.steps]

    def verify(self, leaf_data: bytes, expected_root: bytes, hasher: Hasher | None = None) -> bool:
        """Shorthand for ``verify_merkle_proof(leaf_data, self, expected_root)``."""
        return verify_merkle_proof(leaf_data, self, expected_root, hasher=hasher)


def compute_tree_height(num_leaves: int) -> int:
    """
    Height of a tree with ``num_leaves`` leaves: ceil(log2(num_leaves)).

    A single leaf has height 0; the tree always has height + 1 levels.

    Raises:
        EmptyInputError: If num_leaves < 1
    """
    if num_leaves < 1:
        raise EmptyInputError(
            f"A Merkle tree needs at least one leaf, got {num_leaves}",
            details={"leaf_count": num_leaves},
        )
    return (num_leaves - 1).bit_length()


def _as_bytes(data: Any, what: str = "Leaf data") -> bytes:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"{what} must be bytes-like, got {type(data).__name__}")


class MerkleTree:
    """
    A Merkle tree over an ordered sequence of byte elements.

    Built with :meth:`build` (or :func:`build_merkle_tree`). The tree owns
    its level arrays and the raw data of every leaf. ``update_leaf``
    mutates the tree in place under an exclusive lock; readers take a
    shared lock, so a tree may be shared between threads.

    Example:
        >>> tree = MerkleTree.build([b"a", b"b", b"c"])
        >>> proof = tree.generate_proof(2)
        >>> verify_merkle_proof(b"c", proof, tree.root())
        True
    """

    def __init__(
        self,
        levels: list[list[bytes]],
        leaves: list[bytes],
        hasher: Hasher,
    ) -> None:
        self._levels = levels
        self._leaves = leaves
        self._hasher = hasher
        self._lock = ReadWriteLock()

    @classmethod
    def build(cls, leaves: Iterable[bytes], hasher: Hasher | None = None) -> "MerkleTree":
        """
        Build a tree from an ordered sequence of raw elements.

        Algorithm:
        1. Level 0: leaf hash of every element
        2. Pair adjacent nodes left to right into node hashes
        3. Promote an unpaired trailing node unchanged
        4. Repeat until a single node (the root) remains

        Args:
            leaves: Ordered raw elements (bytes-like). Order matters.
            hasher: Hash configuration (default SHA-256, 0x00/0x01 tags)

        Returns:
            A new MerkleTree

        Raises:
            EmptyInputError: If ``leaves`` is empty
            TypeError: If an element is not bytes-like
        """
        hasher = hasher or DEFAULT_HASHER
        data = [_as_bytes(leaf) for leaf in leaves]
        if not data:
            raise EmptyInputError()

        level = [hasher.leaf_hash(item) for item in data]
        levels = [level]

        while len(level) > 1:
            next_level: list[bytes] = []
            for i in range(0, len(level) - 1, 2):
                next_level.append(hasher.node_hash(level[i], level[i + 1]))
            if len(level) % 2 == 1:
                next_level.append(level[-1])
            levels.append(next_level)
            level = next_level

        tree = cls(levels, data, hasher)
        logger.debug(
            f"Built Merkle tree: {len(data)} leaves, height {len(levels) - 1}, "
            f"root {to_hex(level[0])[:18]}"
        )
        return tree

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def hasher(self) -> Hasher:
        return self._hasher

    @property
    def leaf_count(self) -> int:
        return len(self._leaves)

    def __len__(self) -> int:
        return len(self._leaves)

    @property
    def height(self) -> int:
        """ceil(log2(leaf_count)); 0 for a single leaf."""
        return len(self._levels) - 1

    def root(self) -> bytes:
        """Current root hash."""
        with self._lock.read_locked():
            return self._levels[-1][0]

    def leaf_data(self, index: int) -> bytes:
        """Raw data currently stored at ``index``."""
        with self._lock.read_locked():
            return self._leaves[self._check_index(index)]

    def leaf_hash(self, index: int) -> bytes:
        """Leaf hash currently stored at ``index``."""
        with self._lock.read_locked():
            return self._levels[0][self._check_index(index)]

    def level(self, depth: int) -> tuple[bytes, ...]:
        """
        Snapshot of the node hashes on one level (0 = leaves).

        Raises:
            IndexError: If depth is not in 0..height
        """
        if not 0 <= depth <= self.height:
            raise IndexError(f"Level {depth} out of range for tree of height {self.height}")
        with self._lock.read_locked():
            return tuple(self._levels[depth])

    def _check_index(self, index: Any) -> int:
        count = len(self._leaves)
        try:
            position = operator.index(index)
        except TypeError:
            raise IndexOutOfRangeError(
                f"Leaf index must be an integer, got {type(index).__name__}",
                index=repr(index),
                leaf_count=count,
            ) from None
        if position < 0 or position >= count:
            raise IndexOutOfRangeError(
                f"Leaf index {position} out of range for {count} leaves",
                index=position,
                leaf_count=count,
            )
        return position

    # -------------------------------------------------------------------------
    # Proofs
    # -------------------------------------------------------------------------

    def generate_proof(self, index: int) -> MerkleProof:
        """
        Generate an inclusion proof for the leaf at ``index``.

        At each level below the root, records the sibling of the path node
        and whether that sibling is on the left. A promoted node has no
        sibling and contributes no step.

        Raises:
            IndexOutOfRangeError: If index is not a valid leaf position
        """
        with self._lock.read_locked():
            leaf_index = self._check_index(index)
            position = leaf_index
            steps: list[ProofStep] = []
            for level in self._levels[:-1]:
                sibling = position ^ 1
                if sibling < len(level):
                    steps.append(ProofStep(level[sibling], sibling < position))
                position //= 2
            return MerkleProof(
                steps=tuple(steps),
                leaf_index=leaf_index,
                leaf_count=len(self._leaves),
            )

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------

    def update_leaf(self, index: int, new_data: bytes) -> bytes:
        """
        Replace the leaf at ``index`` and recompute its path to the root.

        Each ancestor is recombined with its existing sibling, read from
        the tree rather than recomputed. Costs O(height) hashes and writes;
        nodes off the path are untouched.

        Args:
            index: Leaf position to replace
            new_data: New raw element

        Returns:
            The new root hash

        Raises:
            IndexOutOfRangeError: If index is not a valid leaf position
            TypeError: If new_data is not bytes-like
        """
        data = _as_bytes(new_data)
        hasher = self._hasher
        with self._lock.write_locked():
            position = self._check_index(index)
            self._leaves[position] = data
            current = hasher.leaf_hash(data)
            self._levels[0][position] = current

            for depth in range(len(self._levels) - 1):
                level = self._levels[depth]
                sibling = position ^ 1
                if sibling < len(level):
                    if sibling < position:
                        current = hasher.node_hash(level[sibling], current)
                    else:
                        current = hasher.node_hash(current, level[sibling])
                position //= 2
                self._levels[depth + 1][position] = current

        logger.debug(f"Updated leaf {index}: new root {to_hex(current)[:18]}")
        return current

    def copy(self) -> "MerkleTree":
        """Independent copy of this tree; hash values are shared, arrays are not."""
        with self._lock.read_locked():
            return MerkleTree(
                [list(level) for level in self._levels],
                list(self._leaves),
                self._hasher,
            )

    def with_leaf(self, index: int, new_data: bytes) -> "MerkleTree":
        """
        Copy-on-write update: return a new tree with one leaf replaced.

        This tree is left unchanged, so readers holding it keep a stable
        version.
        """
        self._check_index(index)
        updated = self.copy()
        updated.update_leaf(index, new_data)
        return updated

    def __repr__(self) -> str:
        return (
            f"MerkleTree(leaves={self.leaf_count}, height={self.height}, "
            f"algorithm={self._hasher.algorithm!r}, root={to_hex(self.root())})"
        )


# =============================================================================
# Functional API
# =============================================================================

def build_merkle_tree(leaves: Iterable[bytes], hasher: Hasher | None = None) -> MerkleTree:
    """Build a MerkleTree; see :meth:`MerkleTree.build`."""
    return MerkleTree.build(leaves, hasher=hasher)


def generate_merkle_proof(tree: MerkleTree, index: int) -> MerkleProof:
    """Generate an inclusion proof; see :meth:`MerkleTree.generate_proof`."""
    return tree.generate_proof(index)


def update_merkle_leaf(tree: MerkleTree, index: int, new_data: bytes) -> bytes:
    """Update one leaf in place and return the new root; see :meth:`MerkleTree.update_leaf`."""
    return tree.update_leaf(index, new_data)


def verify_merkle_proof(
    leaf_data: bytes,
    proof: MerkleProof | Sequence[tuple[bytes, bool]],
    expected_root: bytes,
    hasher: Hasher | None = None,
) -> bool:
    """
    Verify that ``leaf_data`` is included under ``expected_root``.

    Recomputes the root from the leaf and the proof steps without any
    access to the tree.

    Algorithm:
    1. current = leaf_hash(leaf_data)
    2. For each (sibling_hash, sibling_is_left), bottom-up:
       - sibling on the left:  current = node_hash(sibling, current)
       - sibling on the right: current = node_hash(current, sibling)
    3. Compare current with expected_root

    Args:
        leaf_data: Raw element claimed to be in the tree
        proof: MerkleProof or any iterable of (sibling_hash, sibling_is_left)
        expected_root: Root hash the proof is checked against
        hasher: Hash configuration; must match the one the tree used

    Returns:
        True if the recomputed root matches, False otherwise. A malformed
        proof is a failed proof and also returns False.
    """
    hasher = hasher or DEFAULT_HASHER
    try:
        current = hasher.leaf_hash(_as_bytes(leaf_data))
        for sibling_hash, sibling_is_left in proof:
            if not isinstance(sibling_is_left, bool):
                raise TypeError(
                    f"sibling_is_left must be a bool, got {type(sibling_is_left).__name__}"
                )
            sibling = _as_bytes(sibling_hash, "Sibling hash")
            if sibling_is_left:
                current = hasher.node_hash(sibling, current)
            else:
                current = hasher.node_hash(current, sibling)
        return hmac.compare_digest(current, _as_bytes(expected_root, "Expected root"))
    except (TypeError, ValueError) as e:
        logger.debug(f"Rejecting malformed Merkle proof: {e}")
        return False


__all__ = [
    "ProofStep",
    "MerkleProof",
    "MerkleTree",
    "compute_tree_height",
    "build_merkle_tree",
    "generate_merkle_proof",
    "update_merkle_leaf",
    "verify_merkle_proof",
]
