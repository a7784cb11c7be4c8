"""
Pytest configuration and fixtures for FixedHashTable tests.

This file contains shared fixtures and configuration for all test modules.
"""

import sys
import tempfile
from pathlib import Path

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def temp_dir():
    """Create a temporary directory for a single test."""
    temp_dir = tempfile.mkdtemp(prefix="fixed_hash_table_test_")
    yield Path(temp_dir)

    # Cleanup
    import shutil

    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def table():
    """Provide a default-sized table that is closed after the test."""
    from src.data_structures.fixed_hash_table import FixedHashTable

    ht = FixedHashTable()
    yield ht
    ht.close()


@pytest.fixture
def sample_pairs():
    """Provide a consistent set of key/value pairs for testing."""
    return [
        ("cat", "mammal"),
        ("dog", "mammal"),
        ("eagle", "bird"),
        ("salmon", "fish"),
        ("python", "reptile"),
        ("frog", "amphibian"),
        ("bee", "insect"),
    ]


@pytest.fixture
def colliding_keys():
    """Return a function finding n distinct keys sharing the first probe bucket."""
    from src.data_structures.fixed_hash_table import probe_index

    def find(n: int, size: int = 53, prefix: str = "key_"):
        buckets = {}
        i = 0
        while True:
            key = f"{prefix}{i}"
            bucket = probe_index(key, size, 0)
            buckets.setdefault(bucket, []).append(key)
            if len(buckets[bucket]) == n:
                return buckets[bucket]
            i += 1

    return find


# Configure pytest markers
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


# Custom collection modifiers
def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        if "integration" in item.nodeid or "test_integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)

        if any(keyword in item.nodeid for keyword in ["large", "stress"]):
            item.add_marker(pytest.mark.slow)

        if not any(
            marker.name in ["integration", "slow"] for marker in item.iter_markers()
        ):
            item.add_marker(pytest.mark.unit)


# Pytest options
def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-slow", action="store_true", default=False, help="run slow tests"
    )


def pytest_runtest_setup(item):
    """Setup for individual test runs."""
    # Skip slow tests unless --run-slow is passed
    if "slow" in item.keywords and not item.config.getoption("--run-slow"):
        pytest.skip("need --run-slow option to run")
