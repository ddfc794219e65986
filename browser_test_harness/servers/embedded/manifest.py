"""Embedded server manifest."""

from browser_test_harness.servers.embedded.config import EmbeddedServerConfig
from browser_test_harness.servers.embedded.server import EmbeddedServer
from browser_test_harness.servers.manifest import ServerManifest

embedded_manifest = ServerManifest(
    config_cls=EmbeddedServerConfig,
    server_factory=EmbeddedServer.from_config,
)
