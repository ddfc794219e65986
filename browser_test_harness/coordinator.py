"""Run coordinator sequencing one harness run from discovery to teardown."""

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager, AsyncExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeAlias, TypeVar

from pydantic import BaseModel

from browser_test_harness.browser import BrowserSession
from browser_test_harness.bundler import BUNDLE_NAME, build_bundle, write_entry_module
from browser_test_harness.config import HarnessConfig
from browser_test_harness.discovery import find_test_files
from browser_test_harness.document import (
    HARNESS_DOCUMENT_NAME,
    ReporterAssets,
    render_harness_document,
    write_harness_document,
)
from browser_test_harness.import_guard import check_imports
from browser_test_harness.models.result import RunResult
from browser_test_harness.servers.base import HarnessServer
from browser_test_harness.servers.manifest import ServerManifest

log = logging.getLogger(__name__)

ConfigT = TypeVar("ConfigT", bound=BaseModel)

BrowserFactory: TypeAlias = Callable[
    [HarnessConfig], AbstractAsyncContextManager[BrowserSession]
]


@dataclass(frozen=True, kw_only=True)
class RunCoordinator(Generic[ConfigT]):
    """Runs the discovered test files once in a headless browser."""

    config: HarnessConfig
    server: ServerManifest[ConfigT]
    server_config: ConfigT
    browser_factory: BrowserFactory = BrowserSession.launch

    async def run(self) -> RunResult:
        """Discover, bundle, serve and run the tests.

        The server and the browser are started concurrently and both are torn
        down before this returns or raises, whichever step failed.

        Returns:
            Success when the reporter counted no failures, failure otherwise

        Raises:
            HarnessError: If the run is aborted before the reporter finished

        """
        started = time.monotonic()

        test_files = self.discover()
        check_imports(test_files, self.config.reporter_module)
        document = await self.prepare_document(test_files)

        async with AsyncExitStack() as stack:
            server, session = await self._start(stack, document)

            await session.navigate(str(server.url), self.config.load_timeout_ms)

            run_started = time.monotonic()
            failures = await session.run_reporter(self.config.reporter)
            log.info("Tests ran in %.2fs", time.monotonic() - run_started)

            await session.relay.flush()

        duration = time.monotonic() - started
        if failures:
            return RunResult(
                status="failure",
                duration=duration,
                failures=failures,
                message=f"FAILED: {failures}",
            )
        return RunResult(status="success", duration=duration)

    def discover(self) -> Sequence[Path]:
        """Find the test files and log them."""
        test_files = find_test_files(
            self.config.root,
            self.config.test_suffix,
            exclude={*self.config.exclude_dirs, self.config.scratch_dir_name},
        )
        if not test_files:
            log.warning(
                "No %s files found under %s", self.config.test_suffix, self.config.root
            )
        log.info("Discovered %d test file(s):", len(test_files))
        for path in test_files:
            log.info("  %s", path.relative_to(self.config.root))
        return test_files

    async def prepare_document(self, test_files: Sequence[Path]) -> Path:
        """Write the entry module, bundle it if needed and write the document."""
        scratch_dir = self.config.scratch_dir
        assets = ReporterAssets.locate(
            self.config.root, self.config.reporter_module, self.config.reporter_dir
        )
        entry = write_entry_module(test_files, scratch_dir)

        if self.server.bundles_sources:
            script, inline = entry, False
        else:
            bundle_started = time.monotonic()
            script = await build_bundle(
                entry, scratch_dir / BUNDLE_NAME, self.config.bundler
            )
            log.info("Bundled in %.2fs", time.monotonic() - bundle_started)
            inline = True

        document = render_harness_document(
            assets, script, inline=inline, base_dir=scratch_dir, ui=self.config.ui
        )
        return write_harness_document(document, scratch_dir / HARNESS_DOCUMENT_NAME)

    async def _start(
        self, stack: AsyncExitStack, document: Path
    ) -> tuple[HarnessServer, BrowserSession]:
        """Start the server and the browser concurrently.

        Both are registered on ``stack`` as soon as they are up. If either fails
        the other is cancelled and the first error is raised as is.
        """
        try:
            async with asyncio.TaskGroup() as group:
                serving = group.create_task(self._serve(stack, document))
                launching = group.create_task(
                    stack.enter_async_context(self.browser_factory(self.config))
                )
        except ExceptionGroup as errors:
            raise errors.exceptions[0]

        return serving.result(), launching.result()

    async def _serve(self, stack: AsyncExitStack, document: Path) -> HarnessServer:
        server = await stack.enter_async_context(
            self.server.server_factory(self.server_config, document)
        )
        await server.wait_until_ready()
        log.info("Harness served at %s", server.url)
        return server
