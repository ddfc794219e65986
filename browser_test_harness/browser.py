"""Headless browser session driving the harness page."""

import asyncio
import json
import logging
import time
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Protocol

from playwright.async_api import Browser, ConsoleMessage, Page, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from browser_test_harness.config import HarnessConfig
from browser_test_harness.errors import BrowserError, NavigationTimeout

log = logging.getLogger(__name__)

CONSOLE_LOGGER_NAME = "browser_test_harness.console"

CONSOLE_LEVELS: Mapping[str, int] = {
    "log": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "assert": logging.ERROR,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}

RUN_REPORTER_SCRIPT = """
reporter => new Promise(resolve => {
    mocha.reporter(reporter).run(failures => resolve(failures));
})
"""


class ConsoleSink(Protocol):
    """Receiver for console messages relayed from the page."""

    def emit(self, method: str, args: Sequence[Any]) -> None:
        """Emit one console call with its resolved argument values."""


def format_console_args(args: Sequence[Any]) -> str:
    """Join console arguments the way a console prints them."""
    return " ".join(
        arg if isinstance(arg, str) else json.dumps(arg, default=str) for arg in args
    )


@dataclass(frozen=True, kw_only=True)
class LoggingConsoleSink:
    """Sink writing console calls through the matching logging level.

    Unknown console methods fall back to the generic info level.
    """

    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger(CONSOLE_LOGGER_NAME)
    )

    def emit(self, method: str, args: Sequence[Any]) -> None:
        """Log the call at the level matching ``method``."""
        level = CONSOLE_LEVELS.get(method, logging.INFO)
        self.logger.log(level, "%s", format_console_args(args))


async def resolve_console_args(message: ConsoleMessage) -> Sequence[Any]:
    """Resolve the argument values of a console message.

    Falls back to the message text when a handle can no longer be resolved,
    e.g. after the page has been closed.
    """
    try:
        return await asyncio.gather(*(arg.json_value() for arg in message.args))
    except PlaywrightError:
        return [message.text]


@dataclass(kw_only=True)
class ConsoleRelay:
    """Forwards page console messages to a sink without blocking the page.

    Each message is relayed by its own task. Tasks emit in the order the
    messages arrived, and ``flush`` waits for the ones still in flight.
    """

    sink: ConsoleSink
    _pending: set[asyncio.Task[None]] = field(default_factory=set, repr=False)
    _last: asyncio.Task[None] | None = field(default=None, repr=False)

    def attach(self, page: Page) -> None:
        """Subscribe to the console events of ``page``."""
        page.on("console", self.on_message)

    def on_message(self, message: ConsoleMessage) -> None:
        """Schedule relaying of one console message."""
        task = asyncio.get_running_loop().create_task(
            self._relay(message, self._last)
        )
        self._last = task
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _relay(
        self, message: ConsoleMessage, previous: asyncio.Task[None] | None
    ) -> None:
        args = await resolve_console_args(message)
        if previous is not None:
            await asyncio.wait({previous})
        self.sink.emit(message.type, args)

    async def flush(self) -> None:
        """Wait until every message received so far has been emitted.

        A message that fails to be relayed is logged and does not fail the run.
        """
        while self._pending:
            results = await asyncio.gather(
                *tuple(self._pending), return_exceptions=True
            )
            for result in results:
                if isinstance(result, Exception):
                    log.warning(
                        "Failed to relay console message: %r",
                        result,
                        exc_info=result,
                    )


def launch_options(config: HarnessConfig) -> dict[str, Any]:
    """Chromium launch options for the harness.

    Sandboxing is disabled since the harness typically runs in containers.
    """
    options: dict[str, Any] = {"headless": True, "args": ["--no-sandbox"]}
    if config.executable_path is not None:
        options["executable_path"] = str(config.executable_path)
    return options


@dataclass(frozen=True, kw_only=True)
class BrowserSession:
    """Headless browser with the single page running the harness."""

    browser: Browser = field(repr=False)
    page: Page = field(repr=False)
    relay: ConsoleRelay

    @classmethod
    @asynccontextmanager
    async def launch(
        cls, config: HarnessConfig, sink: ConsoleSink | None = None
    ) -> AsyncGenerator["BrowserSession", None]:
        """Launch the browser, open the page and close both when the context exits.

        Raises:
            BrowserError: If the browser cannot be launched

        """
        started = time.monotonic()
        async with async_playwright() as playwright:
            try:
                browser = await playwright.chromium.launch(**launch_options(config))
            except PlaywrightError as error:
                raise BrowserError(f"Cannot launch browser: {error.message}") from error

            try:
                page = await browser.new_page()
                relay = ConsoleRelay(sink=LoggingConsoleSink() if sink is None else sink)
                relay.attach(page)
                log.info("Browser launched in %.2fs", time.monotonic() - started)
                yield cls(browser=browser, page=page, relay=relay)
            finally:
                await browser.close()
                log.info("Browser closed")

    async def navigate(self, url: str, timeout_ms: int) -> None:
        """Open ``url`` and wait for the page's load event.

        Raises:
            NavigationTimeout: If the page does not load within ``timeout_ms``
            BrowserError: If navigation fails otherwise

        """
        log.info("Navigating to %s (timeout=%dms)", url, timeout_ms)
        try:
            await self.page.goto(url, wait_until="load", timeout=timeout_ms)
        except PlaywrightTimeoutError as error:
            raise NavigationTimeout(
                f"Page {url} did not load within {timeout_ms}ms"
            ) from error
        except PlaywrightError as error:
            raise BrowserError(f"Cannot navigate to {url}: {error.message}") from error

    async def run_reporter(self, reporter: str) -> int:
        """Run the in-page reporter and return its failure count.

        Raises:
            BrowserError: If the reporter cannot be started in the page

        """
        try:
            failures = await self.page.evaluate(RUN_REPORTER_SCRIPT, reporter)
        except PlaywrightError as error:
            raise BrowserError(f"Reporter run failed: {error.message}") from error
        return int(failures)
