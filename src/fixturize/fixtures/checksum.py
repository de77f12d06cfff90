# src/fixturize/fixtures/checksum.py
"""Checksum-aware fixture lifecycle.

ChecksumFixture wraps a base fixture and bypasses the usual truncate/insert
flow when the fixture table has not changed since this fixture last loaded
it. Suites with heavy fixture usage then only pay for the tables a test
actually modified.

Decision rules:
- insert: skip when the table fingerprint equals the one cached for this
  fixture identity after its last insert. A fixture with no fingerprint of
  its own also skips when the record hash cached for the connection+table
  equals its record hash (another fixture already loaded the same rows).
  That shortcut is never taken on engines without checksum support.
  Otherwise insert and, on success, cache the post-insert fingerprint and
  the record hash.
- truncate: skip when the table is unmodified. Otherwise forget the record
  hash for the connection+table, then truncate.
- drop: always forget both entries, then drop.

A missing cached fingerprint always counts as modified, so the first load
of every fixture in a process runs in full.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Connection

from fixturize.contracts.enums import FixtureAction, SkipReason
from fixturize.core.cache import FixtureStateCache
from fixturize.core.canonical import record_hash
from fixturize.core.logging import get_logger
from fixturize.fingerprint.provider import FingerprintProvider
from fixturize.fixtures.protocols import FixtureProtocol

logger = get_logger(__name__)


def fixture_identity(fixture: object) -> str:
    """Stable per-class identity used to key cached fingerprints."""
    cls = type(fixture)
    return f"{cls.__module__}.{cls.__qualname__}"


class ChecksumFixture:
    """Decides whether a base fixture's insert/truncate really has to run.

    Attributes:
        fixture: The wrapped base fixture
        identity: Key for this fixture's cached fingerprint
        last_action: What the most recent operation did (None before any)
    """

    def __init__(
        self,
        fixture: FixtureProtocol,
        *,
        cache: FixtureStateCache,
        fingerprints: FingerprintProvider,
        identity: str | None = None,
        enabled: bool = True,
    ) -> None:
        """Wrap a base fixture.

        Args:
            fixture: Base fixture performing the real DDL/DML
            cache: Run-wide state cache shared by all checksum fixtures
            fingerprints: Provider computing table fingerprints
            identity: Override for the fingerprint cache key; defaults to
                the base fixture's qualified class name
            enabled: When False every operation is delegated unconditionally
                and the cache is never read or written
        """
        self.fixture = fixture
        self.identity = identity if identity is not None else fixture_identity(fixture)
        self.enabled = enabled
        self.last_action: FixtureAction | None = None
        self._cache = cache
        self._fingerprints = fingerprints

    @property
    def table(self) -> str:
        return self.fixture.table

    @property
    def connection_name(self) -> str:
        return self.fixture.connection_name

    @property
    def table_key(self) -> str:
        """Record-hash cache key for this fixture's connection and table."""
        return FixtureStateCache.table_key(self.fixture.connection_name, self.fixture.table)

    def create(self, connection: Connection) -> bool:
        """Create the table. Never consults or touches the cache."""
        result = self.fixture.create(connection)
        self.last_action = FixtureAction.CREATED if self.enabled else FixtureAction.PASSTHROUGH
        return result

    def insert(self, connection: Connection) -> bool:
        """Insert the fixture records unless the table already holds them.

        Returns:
            True for either skip path, otherwise the base fixture's result

        Raises:
            FingerprintError: If the table fingerprint cannot be read
        """
        if not self.enabled:
            self.last_action = FixtureAction.PASSTHROUGH
            return self.fixture.insert(connection)

        cached = self._cache.fingerprints.get(self.identity)
        if cached and cached == self._fingerprints.fingerprint(connection, self.table):
            self._skipped(FixtureAction.SKIPPED_UNMODIFIED, SkipReason.TABLE_UNMODIFIED, "insert")
            return True

        records_hash = record_hash(self.fixture.records)
        # Only a fixture that never loaded the table itself may trust another
        # fixture's load, and only where the table can be fingerprinted at all
        if (
            not cached
            and self._fingerprints.supports(connection)
            and self._cache.record_hashes.get(self.table_key) == records_hash
        ):
            self._skipped(FixtureAction.SKIPPED_SAME_RECORDS, SkipReason.RECORDS_ALREADY_LOADED, "insert")
            return True

        result = self.fixture.insert(connection)
        if not result:
            logger.debug("fixture_insert_failed", **self._log_fields())
            return result

        self._cache.fingerprints.set(self.identity, self._fingerprints.fingerprint(connection, self.table))
        self._cache.record_hashes.set(self.table_key, records_hash)
        self.last_action = FixtureAction.INSERTED
        logger.debug("fixture_inserted", records=len(self.fixture.records), **self._log_fields())
        return result

    def truncate(self, connection: Connection) -> bool:
        """Remove all rows unless the table is unchanged since the last insert.

        Raises:
            FingerprintError: If the table fingerprint cannot be read
        """
        if not self.enabled:
            self.last_action = FixtureAction.PASSTHROUGH
            return self.fixture.truncate(connection)

        if self._table_unmodified(connection):
            self._skipped(FixtureAction.SKIPPED_UNMODIFIED, SkipReason.TABLE_UNMODIFIED, "truncate")
            return True

        # The rows no longer match any fixture's records
        self._cache.record_hashes.delete(self.table_key)
        result = self.fixture.truncate(connection)
        self.last_action = FixtureAction.TRUNCATED
        logger.debug("fixture_truncated", **self._log_fields())
        return result

    def drop(self, connection: Connection) -> bool:
        """Drop the table, forgetting every cached fact about it."""
        if not self.enabled:
            self.last_action = FixtureAction.PASSTHROUGH
            return self.fixture.drop(connection)

        self._cache.fingerprints.delete(self.identity)
        self._cache.record_hashes.delete(self.table_key)
        result = self.fixture.drop(connection)
        self.last_action = FixtureAction.DROPPED
        logger.debug("fixture_dropped", **self._log_fields())
        return result

    def _table_unmodified(self, connection: Connection) -> bool:
        """Whether the table still matches the fingerprint cached after our last insert.

        With no cached fingerprint the table counts as modified and no
        fingerprint query is issued.
        """
        cached = self._cache.fingerprints.get(self.identity)
        if not cached:
            return False
        return cached == self._fingerprints.fingerprint(connection, self.table)

    def _skipped(self, action: FixtureAction, reason: SkipReason, operation: str) -> None:
        self.last_action = action
        logger.debug(f"fixture_{operation}_skipped", reason=reason.value, **self._log_fields())

    def _log_fields(self) -> dict[str, Any]:
        return {
            "fixture": self.identity,
            "table": self.fixture.table,
            "connection": self.fixture.connection_name,
        }

    def __repr__(self) -> str:
        return f"ChecksumFixture({self.fixture!r}, identity={self.identity!r}, enabled={self.enabled})"
