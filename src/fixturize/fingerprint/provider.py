# src/fixturize/fingerprint/provider.py
"""Table fingerprints for skip-if-unchanged fixture loading.

A fingerprint summarizes a table's stored state as
``"<checksum>:<auto_increment>"``. Equal fingerprints mean the table is, with
high but not cryptographic confidence, unchanged since the earlier one was
taken.

Dialects without a registered SupportsChecksum adapter get a volatile
fingerprint that never repeats, so every load on them runs in full.

Usage:
    from fixturize.fingerprint import create_fingerprint_provider

    provider = create_fingerprint_provider(settings.fingerprint)
    with engine.connect() as conn:
        before = provider.fingerprint(conn, "users")
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable
from typing import Any

import pluggy
from sqlalchemy import Connection
from sqlalchemy.exc import SQLAlchemyError

from fixturize.contracts.errors import AdapterRegistrationError, FingerprintError
from fixturize.core.clock import DEFAULT_CLOCK, Clock
from fixturize.core.config import FingerprintSettings
from fixturize.core.logging import get_logger
from fixturize.fingerprint.hookspecs import PROJECT_NAME, FixturizeChecksumSpec
from fixturize.fingerprint.mysql import BuiltinChecksumAdaptersPlugin
from fixturize.fingerprint.protocols import SupportsChecksum

logger = get_logger(__name__)

# Shared by every provider in the process so volatile fingerprints stay
# unique even when the clock does not advance between reads.
_VOLATILE_SEQUENCE = itertools.count()


class FingerprintProvider:
    """Computes table fingerprints through per-dialect checksum adapters."""

    def __init__(
        self,
        adapters: Iterable[SupportsChecksum] = (),
        *,
        clock: Clock = DEFAULT_CLOCK,
    ) -> None:
        """Build the dialect registry.

        Args:
            adapters: Checksum adapters; each claims one or more dialects
            clock: Wall clock for volatile fingerprints

        Raises:
            AdapterRegistrationError: If two adapters claim the same dialect
        """
        self._clock = clock
        self._adapters: dict[str, SupportsChecksum] = {}
        self._fallback_logged: set[str] = set()
        for adapter in adapters:
            for dialect in adapter.dialects:
                if dialect in self._adapters:
                    existing = type(self._adapters[dialect]).__name__
                    raise AdapterRegistrationError(
                        type(adapter).__name__,
                        f"dialect '{dialect}' is already handled by {existing}",
                    )
                self._adapters[dialect] = adapter

    @property
    def dialects(self) -> frozenset[str]:
        """Dialects with checksum support."""
        return frozenset(self._adapters)

    def supports(self, connection: Connection) -> bool:
        """Whether the connection's engine can be fingerprinted reliably."""
        return connection.dialect.name in self._adapters

    def fingerprint(self, connection: Connection, table: str) -> str:
        """Return the current fingerprint of ``table``.

        Args:
            connection: Open connection to the fixture database
            table: Unquoted table name

        Returns:
            Fingerprint string. Volatile (never repeating) for dialects
            without checksum support.

        Raises:
            FingerprintError: If the checksum or auto-increment cannot be read
        """
        dialect = connection.dialect.name
        try:
            adapter = self._adapters[dialect]
        except KeyError:
            return self._volatile_fingerprint(dialect)

        schema = connection.engine.url.database
        if not schema:
            raise FingerprintError(table, "connection URL names no database; cannot look up AUTO_INCREMENT")

        try:
            checksum = adapter.table_checksum(connection, table)
            auto_increment = adapter.auto_increment(connection, schema, table)
        except SQLAlchemyError as e:
            raise FingerprintError(table, f"{type(e).__name__}: {e}") from e

        return f"{checksum}:{auto_increment}"

    def _volatile_fingerprint(self, dialect: str) -> str:
        if dialect not in self._fallback_logged:
            self._fallback_logged.add(dialect)
            logger.debug(
                "fingerprint_unsupported_dialect",
                dialect=dialect,
                message="No checksum adapter; fixtures on this engine always reload",
            )
        return f"volatile:{self._clock.time_ns()}:{next(_VOLATILE_SEQUENCE)}"


def _discover_adapters(
    settings: FingerprintSettings,
    adapter_plugins: Iterable[Any] = (),
) -> list[SupportsChecksum]:
    """Discover checksum adapters via pluggy hooks.

    Registers the built-in adapters plus any additional plugin objects, then
    calls ``fixturize_get_checksum_adapters`` on each.

    Raises:
        AdapterRegistrationError: If plugin registration fails or a hook
            returns something other than an iterable of SupportsChecksum
    """
    plugin_manager = pluggy.PluginManager(PROJECT_NAME)
    plugin_manager.add_hookspecs(FixturizeChecksumSpec)

    plugins_to_register: list[Any] = [BuiltinChecksumAdaptersPlugin(), *list(adapter_plugins)]
    for plugin in plugins_to_register:
        try:
            plugin_manager.register(plugin)
            plugin_manager.check_pending()
        except (pluggy.PluginValidationError, ValueError) as e:
            # PluginValidationError: hook spec mismatch (wrong method names, etc.)
            # ValueError: duplicate plugin object or plugin name already registered
            if isinstance(e, pluggy.PluginValidationError):
                plugin_manager.unregister(plugin=plugin)
            raise AdapterRegistrationError(type(plugin).__name__, f"invalid plugin: {e}") from e

    # Implementations may accept any subset of the hook's arguments
    hook_kwargs: dict[str, Any] = {"settings": settings}
    adapters: list[SupportsChecksum] = []
    for hook_impl in plugin_manager.hook.fixturize_get_checksum_adapters.get_hookimpls():
        plugin_name = type(hook_impl.plugin).__name__
        try:
            returned = hook_impl.function(*(hook_kwargs[name] for name in hook_impl.argnames))
        except Exception as e:
            raise AdapterRegistrationError(plugin_name, f"fixturize_get_checksum_adapters raised: {e}") from e

        if returned is None or isinstance(returned, str | bytes):
            raise AdapterRegistrationError(
                plugin_name,
                f"fixturize_get_checksum_adapters returned {type(returned).__name__}; expected iterable of adapters",
            )
        try:
            returned_iter = iter(returned)
        except TypeError as e:
            raise AdapterRegistrationError(
                plugin_name,
                f"fixturize_get_checksum_adapters returned {type(returned).__name__}; expected iterable of adapters",
            ) from e

        for adapter in returned_iter:
            if not isinstance(adapter, SupportsChecksum):
                raise AdapterRegistrationError(
                    plugin_name,
                    f"{type(adapter).__name__} does not implement SupportsChecksum",
                )
            adapters.append(adapter)

    return adapters


def create_fingerprint_provider(
    settings: FingerprintSettings | None = None,
    *,
    adapter_plugins: Iterable[Any] = (),
    clock: Clock = DEFAULT_CLOCK,
) -> FingerprintProvider:
    """Create a FingerprintProvider with every discoverable adapter.

    Args:
        settings: Fingerprint settings (defaults when None)
        adapter_plugins: Extra plugin objects providing
            ``fixturize_get_checksum_adapters`` hooks
        clock: Wall clock for volatile fingerprints

    Raises:
        AdapterRegistrationError: If discovery fails or dialects collide
    """
    if settings is None:
        settings = FingerprintSettings()
    adapters = _discover_adapters(settings, adapter_plugins)
    provider = FingerprintProvider(adapters, clock=clock)
    logger.debug("fingerprint_provider_created", dialects=sorted(provider.dialects))
    return provider
