"""External dev server that bundles and serves the harness document."""

import asyncio
import codecs
import contextlib
import logging
import shlex
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from yarl import URL

from browser_test_harness.errors import ServingError
from browser_test_harness.servers.base import HarnessServer
from browser_test_harness.servers.dev_server.config import DevServerConfig

log = logging.getLogger(__name__)

READ_CHUNK_SIZE = 4096
# Time allowed for output still in the pipe to be scanned after the process exits
OUTPUT_DRAIN_TIMEOUT = 1.0


async def relay_output(
    stream: asyncio.StreamReader,
    ready_text: str,
    ready: asyncio.Event,
    output: TextIO,
) -> None:
    """Copy the dev server's output to ``output`` and flag ``ready_text``.

    The readiness text is matched across chunk boundaries. Reading continues
    after readiness so the dev server never blocks on a full pipe.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    keep = len(ready_text) - 1
    tail = ""

    while chunk := await stream.read(READ_CHUNK_SIZE):
        text = decoder.decode(chunk)
        output.write(text)
        output.flush()

        if ready.is_set():
            continue

        window = tail + text
        if ready_text in window:
            log.info("Dev server reported readiness")
            ready.set()
        tail = window[max(len(window) - keep, 0) :]


@dataclass(frozen=True, kw_only=True)
class DevServer(HarnessServer):
    """Dev server child process, parcel by default.

    Ready once its output contains the configured readiness text or once it
    exits with code 0, whichever happens first.
    """

    config: DevServerConfig
    process: asyncio.subprocess.Process = field(repr=False)
    ready: asyncio.Event = field(repr=False)
    relay: asyncio.Task[None] = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls,
        config: DevServerConfig,
        document: Path,
        output: TextIO | None = None,
    ) -> AsyncGenerator["DevServer", None]:
        """Spawn the dev server for ``document`` and stop it when the context exits."""
        args = [*config.command, str(document), "--port", str(config.port)]
        log.info("Starting dev server: %s", shlex.join(args))

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as error:
            raise ServingError(
                f"Dev server executable not found: {config.command[0]}"
            ) from error

        ready = asyncio.Event()
        relay = asyncio.create_task(
            relay_output(
                process.stdout,  # type: ignore[arg-type]
                config.ready_text,
                ready,
                sys.stdout if output is None else output,
            )
        )
        server = cls(config=config, process=process, ready=ready, relay=relay)
        try:
            yield server
        finally:
            await server.stop()

    @property
    def url(self) -> URL:
        """URL the dev server listens on."""
        return URL.build(
            scheme="http", host=self.config.host, port=self.config.port, path="/"
        )

    async def wait_until_ready(self) -> None:
        """Wait for the readiness text or a clean exit.

        Raises:
            ServingError: If the dev server exits with a non-zero code first

        """
        ready = asyncio.ensure_future(self.ready.wait())
        exited = asyncio.ensure_future(self.process.wait())
        try:
            await asyncio.wait({ready, exited}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            ready.cancel()
            exited.cancel()

        if not self.ready.is_set() and self.process.returncode not in (None, 0):
            await asyncio.wait({self.relay}, timeout=OUTPUT_DRAIN_TIMEOUT)

        if self.ready.is_set():
            return

        if self.process.returncode == 0:
            log.info("Dev server exited with code 0, treating it as ready")
            return

        raise ServingError(
            f"Dev server exited with code {self.process.returncode} before "
            "becoming ready"
        )

    async def stop(self) -> None:
        """Terminate the dev server, killing it after the grace period."""
        if self.process.returncode is None:
            log.info("Stopping dev server (pid=%s)", self.process.pid)
            with contextlib.suppress(ProcessLookupError):
                self.process.terminate()
            try:
                await asyncio.wait_for(self.process.wait(), self.config.stop_timeout)
            except TimeoutError:
                log.warning(
                    "Dev server did not stop within %.1fs, killing it",
                    self.config.stop_timeout,
                )
                with contextlib.suppress(ProcessLookupError):
                    self.process.kill()
                await self.process.wait()

        self.relay.cancel()
        await asyncio.wait({self.relay})
