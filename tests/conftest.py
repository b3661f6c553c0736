"""
Pytest configuration and shared fixtures for ProofTrace tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_hash = _common.make_hash
make_hashes = _common.make_hashes
make_record = _common.make_record
make_records = _common.make_records
make_registry = _common.make_registry
record_and_anchor = _common.record_and_anchor


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep PROOFTRACE_* variables from the developer's shell out of tests."""
    for key in [
        "PROOFTRACE_DATA_DIR",
        "PROOFTRACE_CHAIN",
        "PROOFTRACE_CHAIN_ID",
        "PROOFTRACE_LEDGER_URL",
        "PROOFTRACE_HOST",
        "PROOFTRACE_PORT",
        "PROOFTRACE_LOG_LEVEL",
    ]:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def record():
    """Provide a default InferenceRecord for tests."""
    return make_record()


@pytest.fixture
def store():
    """Provide an empty InMemoryStore."""
    from core.storage.memory import InMemoryStore
    return InMemoryStore()


@pytest.fixture
def registry():
    """Provide a LocalRegistry with a fixed clock."""
    return make_registry()


@pytest.fixture
def anchored(store, registry):
    """Four records stored, batched and anchored; returns (records, batch, anchor)."""
    records = make_records(4)
    batch, anchor = record_and_anchor(store, registry, records)
    return records, batch, anchor


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def assert_check_passed():
    """Helper to assert a specific check passed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert checks[0].ok, f"Check '{check_id}' failed: {checks[0].message}"
    return _assert


@pytest.fixture
def assert_check_failed():
    """Helper to assert a specific check failed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert not checks[0].ok, f"Check '{check_id}' unexpectedly passed"
    return _assert
