# tests/conftest.py
"""Shared test fixtures and helpers.

Database tests run against a file-backed SQLite database per test. SQLite
has no CHECKSUM TABLE, so fingerprint-dependent tests register the test-only
SQLiteChecksumAdapter from tests.helpers.tables; tests of the "unsupported
engine" path use a provider with no adapters at all.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings
from sqlalchemy import Connection, Engine, create_engine

from fixturize.core.cache import FixtureStateCache
from fixturize.core.clock import MockClock
from fixturize.fingerprint.provider import FingerprintProvider
from tests.helpers.tables import SQLiteChecksumAdapter

# =============================================================================
# Hypothesis Profiles
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def engine(tmp_path: Path) -> Iterator[Engine]:
    """File-backed SQLite engine (the URL must name a database)."""
    db_engine = create_engine(f"sqlite:///{tmp_path / 'fixtures.db'}")
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def connection(engine: Engine) -> Iterator[Connection]:
    with engine.connect() as conn:
        yield conn


# =============================================================================
# Fixture State
# =============================================================================


@pytest.fixture
def state_cache() -> FixtureStateCache:
    """A fresh cache per test; the pytest plugin's session cache is not used here."""
    return FixtureStateCache()


@pytest.fixture
def sqlite_adapter() -> SQLiteChecksumAdapter:
    return SQLiteChecksumAdapter()


@pytest.fixture
def fingerprints(sqlite_adapter: SQLiteChecksumAdapter) -> FingerprintProvider:
    """Provider that can fingerprint SQLite tables."""
    return FingerprintProvider([sqlite_adapter])


@pytest.fixture
def volatile_fingerprints() -> FingerprintProvider:
    """Provider with no adapters: every dialect is unsupported."""
    return FingerprintProvider(clock=MockClock(start_ns=1_000))
