# src/fixturize/fixtures/protocols.py
"""Protocol for base fixtures wrapped by ChecksumFixture.

A base fixture performs the real DDL/DML. ChecksumFixture only decides
whether to call it.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from sqlalchemy import Connection


@runtime_checkable
class FixtureProtocol(Protocol):
    """One logical unit of test data bound to one table on one connection.

    Attributes:
        table: Unquoted table name
        connection_name: Identifier of the connection the fixture targets
            (e.g. "test"); combined with ``table`` into the record-hash key
        records: Ordered rows to insert, each a column -> value mapping

    Every operation returns True on success. Database errors propagate.
    """

    table: str
    connection_name: str
    records: Sequence[Mapping[str, Any]]

    def create(self, connection: Connection) -> bool:
        """Create the table if it does not exist."""
        ...

    def insert(self, connection: Connection) -> bool:
        """Insert all records."""
        ...

    def truncate(self, connection: Connection) -> bool:
        """Remove all rows."""
        ...

    def drop(self, connection: Connection) -> bool:
        """Drop the table."""
        ...
