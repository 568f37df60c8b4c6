"""
Common test fixtures shared by all test modules.

Provides factory functions for leaf sequences and an independent
reference computation of the expected root.
"""

import hashlib
import random
import string
from typing import Optional


def make_leaves(count: int, prefix: str = "leaf") -> list[bytes]:
    """Create ``count`` distinct leaves: b"leaf0", b"leaf1", ..."""
    return [f"{prefix}{i}".encode() for i in range(count)]


def make_random_leaves(
    count: int,
    length: int = 10,
    seed: Optional[int] = 1234,
) -> list[bytes]:
    """Create ``count`` random alphanumeric leaves of ``length`` bytes."""
    rng = random.Random(seed)
    charset = string.ascii_letters + string.digits
    return [
        "".join(rng.choice(charset) for _ in range(length)).encode()
        for _ in range(count)
    ]


def reference_leaf_hash(data: bytes) -> bytes:
    """SHA-256(0x00 || data), computed without the package."""
    return hashlib.sha256(b"\x00" + data).digest()


def reference_node_hash(left: bytes, right: bytes) -> bytes:
    """SHA-256(0x01 || left || right), computed without the package."""
    return hashlib.sha256(b"\x01" + left + right).digest()


def reference_root(leaves: list[bytes]) -> bytes:
    """
    Expected root for ``leaves`` with the default hasher.

    Recursive formulation: pair a level, carry the odd node up, recurse.
    """
    def reduce(level: list[bytes]) -> bytes:
        if len(level) == 1:
            return level[0]
        pairs = [
            reference_node_hash(level[i], level[i + 1])
            for i in range(0, len(level) - 1, 2)
        ]
        carry = [level[-1]] if len(level) % 2 else []
        return reduce(pairs + carry)

    return reduce([reference_leaf_hash(leaf) for leaf in leaves])


def flip_bit(data: bytes, bit: int = 0) -> bytes:
    """Return ``data`` with one bit flipped."""
    buf = bytearray(data)
    buf[bit // 8] ^= 1 << (bit % 8)
    return bytes(buf)
