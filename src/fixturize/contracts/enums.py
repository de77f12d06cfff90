"""Actions and reasons reported by fixture lifecycle operations."""

from enum import StrEnum


class FixtureAction(StrEnum):
    """What a ChecksumFixture operation actually did.

    Exposed as ``ChecksumFixture.last_action`` and emitted in log events.
    """

    CREATED = "created"
    INSERTED = "inserted"
    SKIPPED_UNMODIFIED = "skipped_unmodified"
    SKIPPED_SAME_RECORDS = "skipped_same_records"
    TRUNCATED = "truncated"
    DROPPED = "dropped"
    PASSTHROUGH = "passthrough"


class SkipReason(StrEnum):
    """Why a write was skipped."""

    TABLE_UNMODIFIED = "table_unmodified"
    RECORDS_ALREADY_LOADED = "records_already_loaded"
