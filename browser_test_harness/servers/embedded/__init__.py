"""Embedded aiohttp server module."""

from browser_test_harness.servers.embedded.config import EmbeddedServerConfig
from browser_test_harness.servers.embedded.manifest import embedded_manifest
from browser_test_harness.servers.embedded.server import EmbeddedServer

__all__ = ["EmbeddedServer", "EmbeddedServerConfig", "embedded_manifest"]
