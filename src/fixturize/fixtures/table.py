# src/fixturize/fixtures/table.py
"""SQLAlchemy-backed base fixture.

Subclasses declare the table and its rows:

    class UsersFixture(TableFixture):
        table = "users"
        records = [{"id": 1, "name": "alice"}]

        def columns(self):
            return [
                Column("id", Integer, primary_key=True, autoincrement=True),
                Column("name", String(64), nullable=False),
            ]

Wrap an instance in ChecksumFixture to skip redundant loads.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from sqlalchemy import Column, Connection, MetaData, Table, delete, insert, text

# Dialects with TRUNCATE TABLE, mapped to the clause that also resets
# auto-increment counters (implicit on MySQL and MariaDB)
_TRUNCATE_SUFFIXES = {"mysql": "", "mariadb": "", "postgresql": " RESTART IDENTITY"}


class TableFixture:
    """Base fixture performing real CREATE/INSERT/TRUNCATE/DROP statements."""

    table: str
    connection_name: str = "test"
    records: Sequence[Mapping[str, Any]] = ()

    def __init__(self, records: Iterable[Mapping[str, Any]] | None = None) -> None:
        """Build the table definition.

        Args:
            records: Rows overriding the class-level ``records``
        """
        if records is not None:
            self.records = list(records)
        self._metadata = MetaData()
        self._table = Table(self.table, self._metadata, *self.columns())

    def columns(self) -> list[Column[Any]]:
        """Column definitions for the table. Subclasses must override."""
        raise NotImplementedError(f"{type(self).__name__} must define columns()")

    @property
    def table_object(self) -> Table:
        return self._table

    def create(self, connection: Connection) -> bool:
        self._table.create(connection, checkfirst=True)
        return True

    def insert(self, connection: Connection) -> bool:
        if not self.records:
            return True
        connection.execute(insert(self._table), [dict(record) for record in self.records])
        return True

    def truncate(self, connection: Connection) -> bool:
        dialect = connection.dialect.name
        if dialect in _TRUNCATE_SUFFIXES:
            quoted = connection.dialect.identifier_preparer.quote(self.table)
            connection.execute(text(f"TRUNCATE TABLE {quoted}{_TRUNCATE_SUFFIXES[dialect]}"))
        else:
            connection.execute(delete(self._table))
        return True

    def drop(self, connection: Connection) -> bool:
        self._table.drop(connection, checkfirst=True)
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(table={self.table!r}, connection={self.connection_name!r}, records={len(self.records)})"
