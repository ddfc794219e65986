"""Selection of the serving strategy registered under a key."""

from importlib.metadata import entry_points
from typing import Any

from browser_test_harness.errors import ConfigurationError
from browser_test_harness.servers.manifest import ServerManifest

ENTRY_POINT_GROUP = "browser_test_harness.servers"


class ServerNotFoundError(ConfigurationError):
    """Raised when no serving strategy is registered under the requested key."""


def available_servers() -> list[str]:
    """Keys of the installed serving strategies, sorted."""
    return sorted({entry.name for entry in entry_points(group=ENTRY_POINT_GROUP)})


def load_server_manifest(key: str) -> ServerManifest[Any]:
    """Load the manifest of the serving strategy registered as ``key``.

    Strategies are entry points in the ``browser_test_harness.servers`` group,
    e.g. "embedded" and "dev-server".

    Raises:
        ServerNotFoundError: If ``key`` is not registered, listing the keys
            that are

    """
    matches = entry_points(group=ENTRY_POINT_GROUP, name=key)
    if not matches:
        raise ServerNotFoundError(
            f"Server '{key}' not found. Available servers: "
            f"{', '.join(available_servers())}"
        )

    manifest: ServerManifest[Any] = next(iter(matches)).load()
    return manifest
