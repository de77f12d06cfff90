# src/fixturize/core/cache.py
"""State cache shared by all checksum fixtures of one test run.

Two namespaces:
- fingerprints: fixture identity -> table fingerprint after its last load
- record_hashes: "<connection>-<table>" -> hash of the records last loaded

Fixture objects are recreated for every test, so the cache cannot live on
them. One FixtureStateCache is created when the test run starts and injected
into every ChecksumFixture. It is never reset implicitly; entries only go
away through drop/truncate or an explicit clear().

Not thread-safe. Fixture operations run sequentially in one thread.
"""

from __future__ import annotations

from collections.abc import Iterator


class CacheNamespace:
    """A named string-to-string mapping with get/set/delete."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        """Return the cached value, or None if absent."""
        return self._entries.get(key)

    def set(self, key: str, value: str) -> None:
        self._entries[key] = value

    def delete(self, key: str) -> None:
        """Remove an entry. Removing a missing key is a no-op."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"CacheNamespace({self.name!r}, entries={len(self._entries)})"


class FixtureStateCache:
    """Process-lifetime fixture state for one test run."""

    def __init__(self) -> None:
        self.fingerprints = CacheNamespace("table_fingerprints")
        self.record_hashes = CacheNamespace("record_hashes")

    @staticmethod
    def table_key(connection_name: str, table: str) -> str:
        """Build the record-hash key for a table on a connection."""
        return f"{connection_name}-{table}"

    def clear(self) -> None:
        """Forget everything. Only called explicitly, never by fixtures."""
        self.fingerprints.clear()
        self.record_hashes.clear()

    def __repr__(self) -> str:
        return f"FixtureStateCache(fingerprints={len(self.fingerprints)}, record_hashes={len(self.record_hashes)})"
