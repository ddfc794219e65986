"""Tests for server loading module."""

import pytest

from browser_test_harness.servers.dev_server import dev_server_manifest
from browser_test_harness.servers.embedded import embedded_manifest
from browser_test_harness.servers.loading import (
    ServerNotFoundError,
    available_servers,
    load_server_manifest,
)


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("embedded", embedded_manifest),
        ("dev-server", dev_server_manifest),
    ],
)
def test_load_server_manifest_returns_manifest(key: str, expected: object) -> None:
    """Loads server manifest by key."""
    manifest = load_server_manifest(key)

    assert manifest is expected


def test_load_server_manifest_raises_for_unknown_server() -> None:
    """Raises ServerNotFoundError for unknown server key."""
    with pytest.raises(ServerNotFoundError) as exc_info:
        load_server_manifest("unknown-server")

    assert "unknown-server" in str(exc_info.value)
    assert "Available servers" in str(exc_info.value)


def test_only_dev_server_bundles_sources() -> None:
    """The embedded server needs a pre-bundled, inlined document."""
    assert embedded_manifest.bundles_sources is False
    assert dev_server_manifest.bundles_sources is True


def test_available_servers_sorted() -> None:
    """Lists the registered keys in sorted order."""
    assert available_servers() == ["dev-server", "embedded"]


def test_unknown_server_lists_keys_in_order() -> None:
    """Names the registered keys in sorted order."""
    with pytest.raises(
        ServerNotFoundError, match="Available servers: dev-server, embedded"
    ):
        load_server_manifest("nope")
