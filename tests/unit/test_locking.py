"""
Locking Unit Tests
Tests for arbor/merkle/locking.py and concurrent use of MerkleTree
"""
import threading

import pytest

from arbor.merkle import ReadWriteLock, build_merkle_tree, verify_merkle_proof
from fixtures import make_leaves, reference_root


class TestReadWriteLock:
    """Basic lock semantics."""

    def test_readers_share(self):
        lock = ReadWriteLock()

        with lock.read_locked():
            with lock.read_locked():
                assert lock.readers == 2

        assert lock.readers == 0

    def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        entered = threading.Event()

        def reader():
            with lock.read_locked():
                entered.set()

        with lock.write_locked():
            assert lock.write_held
            thread = threading.Thread(target=reader)
            thread.start()
            assert not entered.wait(0.05)

        thread.join(timeout=2)
        assert entered.is_set()
        assert not lock.write_held

    def test_writer_waits_for_readers(self):
        lock = ReadWriteLock()
        acquired = threading.Event()

        def writer():
            with lock.write_locked():
                acquired.set()

        lock.acquire_read()
        thread = threading.Thread(target=writer)
        thread.start()
        assert not acquired.wait(0.05)

        lock.release_read()
        thread.join(timeout=2)
        assert acquired.is_set()

    def test_release_without_acquire(self):
        lock = ReadWriteLock()

        with pytest.raises(RuntimeError):
            lock.release_read()
        with pytest.raises(RuntimeError):
            lock.release_write()

    def test_released_on_exception(self):
        lock = ReadWriteLock()

        with pytest.raises(KeyError):
            with lock.write_locked():
                raise KeyError("boom")

        assert not lock.write_held
        with lock.read_locked():
            assert lock.readers == 1


class TestConcurrentTree:
    """Concurrent updates and proof generation on one tree."""

    def test_concurrent_updates_and_proofs(self):
        leaves = make_leaves(64)
        tree = build_merkle_tree(leaves)
        errors = []
        rounds = 20
        # Every update writes fresh data, so a root never recurs; at most
        # 8 * rounds updates can interleave with one reader's snapshot.
        max_attempts = 8 * rounds + 1

        def updater(offset):
            try:
                for round_ in range(rounds):
                    index = offset + 8 * (round_ % 8)
                    tree.update_leaf(index, f"u{offset}-{round_}".encode())
            except Exception as e:  # pragma: no cover
                errors.append(e)

        def reader():
            try:
                for i in range(64):
                    for _ in range(max_attempts):
                        root_before = tree.root()
                        data = tree.leaf_data(i)
                        proof = tree.generate_proof(i)
                        root_after = tree.root()
                        if root_before == root_after:
                            break
                    else:
                        raise AssertionError(f"no stable snapshot for leaf {i}")
                    # No update landed in between: the proof must match that root.
                    assert len(proof) == tree.height
                    assert verify_merkle_proof(data, proof, root_after), f"torn proof for leaf {i}"
            except Exception as e:  # pragma: no cover
                errors.append(e)

        threads = [threading.Thread(target=updater, args=(k,)) for k in range(8)]
        threads += [threading.Thread(target=reader) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert not errors
        final_leaves = [tree.leaf_data(i) for i in range(64)]
        assert tree.root() == reference_root(final_leaves)
        for i in range(64):
            assert verify_merkle_proof(final_leaves[i], tree.generate_proof(i), tree.root())
