"""Embedded server answering every request with the harness document."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path

from aiohttp import web
from yarl import URL

from browser_test_harness.errors import ServingError
from browser_test_harness.servers.base import HarnessServer
from browser_test_harness.servers.embedded.config import EmbeddedServerConfig

log = logging.getLogger(__name__)


def document_app(document: str) -> web.Application:
    """Create an application serving ``document`` for any method and path."""

    async def handle(request: web.Request) -> web.Response:
        return web.Response(text=document, content_type="text/html")

    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", handle)
    return app


@dataclass(frozen=True, kw_only=True)
class EmbeddedServer(HarnessServer):
    """In-process aiohttp server.

    The served document must be self-contained (bundle and reporter inlined)
    since every path returns the same page.
    """

    config: EmbeddedServerConfig
    runner: web.AppRunner = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: EmbeddedServerConfig, document: Path
    ) -> AsyncGenerator["EmbeddedServer", None]:
        """Bind the listener and serve ``document`` until the context exits."""
        runner = web.AppRunner(document_app(document.read_text(encoding="utf-8")))
        await runner.setup()
        try:
            site = web.TCPSite(runner, config.host, config.port)
            try:
                await site.start()
            except OSError as error:
                raise ServingError(
                    f"Cannot bind {config.host}:{config.port}: "
                    f"{error.strerror or error}"
                ) from error

            server = cls(config=config, runner=runner)
            log.info("Serving %s at %s", document, server.url)
            yield server
        finally:
            await runner.cleanup()
            log.info("Embedded server stopped")

    @property
    def url(self) -> URL:
        """URL of the bound listener, with the actual port when 0 was requested."""
        port = self.runner.addresses[0][1]
        return URL.build(scheme="http", host=self.config.host, port=port, path="/")
