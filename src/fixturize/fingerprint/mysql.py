# src/fixturize/fingerprint/mysql.py
"""Checksum adapter for MySQL and MariaDB.

Uses CHECKSUM TABLE for the content checksum and INFORMATION_SCHEMA.TABLES
for the auto-increment counter. Both are read-only.

MySQL 8 caches INFORMATION_SCHEMA statistics for
information_schema_stats_expiry seconds (default 86400). Servers used for
test runs should set it to 0, otherwise AUTO_INCREMENT can lag behind
inserts and only the checksum detects changes.
"""

from __future__ import annotations

from sqlalchemy import Connection, text

from fixturize.contracts.errors import FingerprintError
from fixturize.core.config import FingerprintSettings
from fixturize.fingerprint.hookspecs import hookimpl

_AUTO_INCREMENT_QUERY = text(
    "SELECT `AUTO_INCREMENT` FROM INFORMATION_SCHEMA.TABLES WHERE TABLE_SCHEMA = :schema AND TABLE_NAME = :table"
)


class MySQLChecksumAdapter:
    """SupportsChecksum implementation for the mysql and mariadb dialects."""

    dialects: tuple[str, ...] = ("mysql", "mariadb")

    def __init__(self, *, extended: bool = False) -> None:
        self._extended = extended

    def table_checksum(self, connection: Connection, table: str) -> str:
        quoted = connection.dialect.identifier_preparer.quote(table)
        statement = f"CHECKSUM TABLE {quoted}"
        if self._extended:
            statement += " EXTENDED"

        row = connection.execute(text(statement)).mappings().first()
        if row is None:
            raise FingerprintError(table, "CHECKSUM TABLE returned no row")
        checksum = row["Checksum"]
        # NULL means the table does not exist (or QUICK was unsupported)
        if checksum is None:
            raise FingerprintError(table, "CHECKSUM TABLE returned NULL checksum")
        return str(checksum)

    def auto_increment(self, connection: Connection, schema: str, table: str) -> str:
        row = connection.execute(_AUTO_INCREMENT_QUERY, {"schema": schema, "table": table}).mappings().first()
        if row is None:
            raise FingerprintError(table, f"table not found in INFORMATION_SCHEMA.TABLES for schema '{schema}'")
        value = row["AUTO_INCREMENT"]
        # NULL for tables without an auto-increment column
        if value is None:
            return ""
        return str(value)


class BuiltinChecksumAdaptersPlugin:
    """Registers the checksum adapters shipped with fixturize."""

    @hookimpl
    def fixturize_get_checksum_adapters(self, settings: FingerprintSettings) -> list[MySQLChecksumAdapter]:
        return [MySQLChecksumAdapter(extended=settings.extended_checksum)]
