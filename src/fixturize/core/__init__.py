"""Core infrastructure: Canonical hashing, State cache, Clock, Configuration, Logging."""

from fixturize.core.cache import CacheNamespace, FixtureStateCache
from fixturize.core.canonical import (
    CANONICAL_VERSION,
    canonical_json,
    record_hash,
    stable_hash,
)
from fixturize.core.clock import DEFAULT_CLOCK, Clock, MockClock, SystemClock
from fixturize.core.config import (
    FingerprintSettings,
    FixturizeSettings,
    LoggingSettings,
    load_settings,
)
from fixturize.core.logging import configure_logging, get_logger

__all__ = [
    "CANONICAL_VERSION",
    "DEFAULT_CLOCK",
    "CacheNamespace",
    "Clock",
    "FingerprintSettings",
    "FixtureStateCache",
    "FixturizeSettings",
    "LoggingSettings",
    "MockClock",
    "SystemClock",
    "canonical_json",
    "configure_logging",
    "get_logger",
    "load_settings",
    "record_hash",
    "stable_hash",
]
