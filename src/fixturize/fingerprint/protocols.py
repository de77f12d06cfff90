# src/fixturize/fingerprint/protocols.py
"""Capability protocol for engines that can fingerprint a table.

The fingerprint provider never inspects concrete driver types. It asks the
adapter registered for the connection's dialect; a dialect with no adapter
simply lacks the capability.
"""

from typing import Protocol, runtime_checkable

from sqlalchemy import Connection


@runtime_checkable
class SupportsChecksum(Protocol):
    """An engine adapter able to read a table checksum and auto-increment.

    Error handling:
        Both methods MUST raise FingerprintError when the backing store
        returns no row or a malformed result. Driver exceptions may propagate;
        the provider wraps them.
    """

    @property
    def dialects(self) -> tuple[str, ...]:
        """SQLAlchemy dialect names this adapter handles (e.g. ("mysql",))."""
        ...

    def table_checksum(self, connection: Connection, table: str) -> str:
        """Return the storage engine's checksum of the table contents."""
        ...

    def auto_increment(self, connection: Connection, schema: str, table: str) -> str:
        """Return the table's next auto-increment value as a string.

        Tables without an auto-increment column yield the empty string.
        """
        ...
