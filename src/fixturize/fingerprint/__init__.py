"""Table fingerprinting: checksum adapters, pluggy discovery and the provider."""

from fixturize.fingerprint.hookspecs import hookimpl
from fixturize.fingerprint.mysql import MySQLChecksumAdapter
from fixturize.fingerprint.protocols import SupportsChecksum
from fixturize.fingerprint.provider import FingerprintProvider, create_fingerprint_provider

__all__ = [
    "FingerprintProvider",
    "MySQLChecksumAdapter",
    "SupportsChecksum",
    "create_fingerprint_provider",
    "hookimpl",
]
