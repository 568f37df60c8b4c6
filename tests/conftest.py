"""
Pytest configuration and shared fixtures for Arbor tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

import importlib

_common = importlib.import_module("fixtures.common")

make_leaves = _common.make_leaves
make_random_leaves = _common.make_random_leaves


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def four_leaves():
    """The four-leaf scenario: [L0, L1, L2, L3]."""
    return [b"L0", b"L1", b"L2", b"L3"]


@pytest.fixture
def odd_leaves():
    """Five leaves, so levels 0 and 1 both carry a promoted node."""
    return make_leaves(5)


@pytest.fixture
def random_leaves():
    """A larger random leaf set with a non-power-of-two size."""
    return make_random_leaves(37)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove ARBOR_* variables so config tests start from defaults."""
    for name in ("ARBOR_HASH_ALGORITHM", "ARBOR_LEAF_TAG", "ARBOR_NODE_TAG", "ARBOR_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
