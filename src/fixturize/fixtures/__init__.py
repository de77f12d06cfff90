"""Fixtures: the checksum-aware lifecycle controller and a SQLAlchemy base fixture."""

from fixturize.fixtures.checksum import ChecksumFixture, fixture_identity
from fixturize.fixtures.protocols import FixtureProtocol
from fixturize.fixtures.records import records_from_frame
from fixturize.fixtures.table import TableFixture

__all__ = [
    "ChecksumFixture",
    "FixtureProtocol",
    "TableFixture",
    "fixture_identity",
    "records_from_frame",
]
