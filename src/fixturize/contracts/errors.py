"""Fixturize exceptions.

Failures while fingerprinting are fatal to the current fixture operation.
Nothing is cached when one is raised, so the next attempt starts from scratch.
"""


class FixturizeError(Exception):
    """Base class for all fixturize errors."""

    pass


class FingerprintError(FixturizeError):
    """Raised when a table's checksum or auto-increment cannot be read.

    Attributes:
        table: Table whose fingerprint was requested
        message: Human-readable error description
    """

    def __init__(self, table: str, message: str) -> None:
        self.table = table
        self.message = message
        super().__init__(f"Cannot fingerprint table '{table}': {message}")


class AdapterRegistrationError(FixturizeError):
    """Raised when a checksum adapter plugin is invalid.

    Attributes:
        plugin: Name of the plugin that failed
        message: Human-readable error description
    """

    def __init__(self, plugin: str, message: str) -> None:
        self.plugin = plugin
        self.message = message
        super().__init__(f"Checksum adapter plugin '{plugin}' failed: {message}")
