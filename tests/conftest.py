"""
Shared fixtures for DocVault tests.
"""

import shutil
import tempfile

import pytest

GIT_AVAILABLE = shutil.which("git") is not None

requires_git = pytest.mark.skipif(not GIT_AVAILABLE, reason="git executable not available")

TEST_KEY = bytes(range(32))


@pytest.fixture
def data_dir():
    """Create temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def key():
    """A fixed 32-byte encryption key."""
    return TEST_KEY
