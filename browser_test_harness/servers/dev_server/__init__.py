"""External dev server module."""

from browser_test_harness.servers.dev_server.config import DevServerConfig
from browser_test_harness.servers.dev_server.manifest import dev_server_manifest
from browser_test_harness.servers.dev_server.server import DevServer

__all__ = ["DevServer", "DevServerConfig", "dev_server_manifest"]
