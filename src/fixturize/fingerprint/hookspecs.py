# src/fixturize/fingerprint/hookspecs.py
"""pluggy hook specifications for checksum adapters.

Adapters implement these hooks to register themselves. The fingerprint
provider factory calls them to build its dialect registry.

Usage (implementing an adapter plugin):
    from fixturize.fingerprint.hookspecs import hookimpl

    class MyEnginePlugin:
        @hookimpl
        def fixturize_get_checksum_adapters(self, settings):
            return [MyEngineChecksumAdapter()]
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from fixturize.core.config import FingerprintSettings
    from fixturize.fingerprint.protocols import SupportsChecksum

PROJECT_NAME = "fixturize"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class FixturizeChecksumSpec:
    """Hook specifications for checksum adapter plugins."""

    @hookspec
    def fixturize_get_checksum_adapters(self, settings: "FingerprintSettings") -> list["SupportsChecksum"]:  # type: ignore[empty-body]
        """Return configured checksum adapter instances.

        Args:
            settings: Fingerprint settings in effect for the run

        Returns:
            List of adapter instances implementing SupportsChecksum
        """
