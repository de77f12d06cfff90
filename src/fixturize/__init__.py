"""
Fixturize: checksum-aware database test fixtures.

Skips redundant truncate/insert cycles when a fixture table's schema and
data are unchanged since the last load in the same test process.
"""

__version__ = "0.1.0"
