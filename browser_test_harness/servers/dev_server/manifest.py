"""Dev server manifest."""

from browser_test_harness.servers.dev_server.config import DevServerConfig
from browser_test_harness.servers.dev_server.server import DevServer
from browser_test_harness.servers.manifest import ServerManifest

dev_server_manifest = ServerManifest(
    config_cls=DevServerConfig,
    server_factory=DevServer.from_config,
    bundles_sources=True,
)
