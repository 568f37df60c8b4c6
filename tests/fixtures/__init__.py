"""
Test fixtures package for Arbor tests.

Usage:
    from fixtures import make_leaves, reference_root

    def test_something():
        leaves = make_leaves(5)
        assert build_merkle_tree(leaves).root() == reference_root(leaves)
"""

from .common import (
    flip_bit,
    make_leaves,
    make_random_leaves,
    reference_leaf_hash,
    reference_node_hash,
    reference_root,
)

__all__ = [
    "make_leaves",
    "make_random_leaves",
    "reference_leaf_hash",
    "reference_node_hash",
    "reference_root",
    "flip_bit",
]
