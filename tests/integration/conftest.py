"""Fixtures for integration tests."""

import socket
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest
from playwright.async_api import async_playwright

from browser_test_harness.testing.payloads import (
    FAKE_REPORTER_SCRIPT,
    FAKE_REPORTER_STYLESHEET,
    suite_source,
)


@pytest.fixture
def harness_project(tmp_path: Path) -> Path:
    """Create a project with the fake reporter installed and no test files."""
    reporter_dir = tmp_path / "node_modules" / "mocha"
    reporter_dir.mkdir(parents=True)
    (reporter_dir / "mocha.js").write_text(FAKE_REPORTER_SCRIPT)
    (reporter_dir / "mocha.css").write_text(FAKE_REPORTER_STYLESHEET)
    return tmp_path


@pytest.fixture
def add_suite(harness_project: Path) -> Callable[..., Path]:
    """Return a function adding test files to the project."""

    def _add(name: str, *, passes: bool = True) -> Path:
        path = harness_project / f"{name}.test.ts"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(suite_source(name, f"{name} works", passes=passes))
        return path

    return _add


@pytest.fixture
def unused_port() -> int:
    """Return a TCP port nothing listens on."""
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
async def chromium() -> AsyncGenerator[None, None]:
    """Skip the test when no Chromium build is installed for playwright."""
    async with async_playwright() as playwright:
        executable = Path(playwright.chromium.executable_path)
    if not executable.exists():
        pytest.skip(f"Chromium not installed at {executable}")
    yield
