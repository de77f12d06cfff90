"""Shared contracts: enums and exceptions used across subsystem boundaries."""

from fixturize.contracts.enums import FixtureAction, SkipReason
from fixturize.contracts.errors import (
    AdapterRegistrationError,
    FingerprintError,
    FixturizeError,
)

__all__ = [
    "AdapterRegistrationError",
    "FingerprintError",
    "FixtureAction",
    "FixturizeError",
    "SkipReason",
]
