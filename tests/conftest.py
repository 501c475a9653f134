"""Shared fixtures for store tests."""

import pathlib
import shutil
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]  # project root
sys.path.insert(0, str(ROOT))

from relstore.core.store import RelationStore  # noqa: E402

# ======================================================================
# FIXTURES
# ======================================================================


@pytest.fixture
def road_store():
    """Directed store: 1 -> 2 -> 3 on key 'road'."""
    S = RelationStore(directed=True, no_relationship=0)
    S.set_dir(1, 2, 10, key="road")
    S.set_dir(2, 3, 4, key="road")
    return S


@pytest.fixture
def mixed_store():
    """Several pairs on keys 'a' and 'b', directed and symmetric."""
    S = RelationStore(directed=True, no_relationship=0)
    S.set_dir(1, 2, 1.0, key="a")
    S.set_undir(2, 3, 2.0, key="a")
    S.set_dir(3, 4, 3.0, key="b")
    S.set_undir(1, 3, 4.0, key="b")
    S.set_dir(5, 6, 5.0, key="a")
    return S


@pytest.fixture
def tmpdir_fixture():
    """Temporary directory for history export tests."""
    tmpdir = Path(tempfile.mkdtemp())
    yield tmpdir
    shutil.rmtree(tmpdir)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
