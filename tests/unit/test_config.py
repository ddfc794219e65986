"""Tests for harness configuration."""

import logging
from pathlib import Path

import pytest

from browser_test_harness.config import (
    DEFAULT_LOAD_TIMEOUT_MS,
    HarnessConfig,
    load_config,
)
from browser_test_harness.errors import ConfigurationError


def test_defaults(tmp_path: Path) -> None:
    """Uses the default timeout, suffix and no executable override."""
    config = load_config(tmp_path, {})

    assert config.root == tmp_path.absolute()
    assert config.load_timeout_ms == DEFAULT_LOAD_TIMEOUT_MS == 20000
    assert config.test_suffix == ".test.ts"
    assert config.executable_path is None
    assert tuple(config.bundler) == ("esbuild",)
    assert config.scratch_dir == tmp_path.absolute() / ".harness"


def test_reads_executable_path(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """Reads and logs PUPPETEER_EXEC_PATH."""
    with caplog.at_level(logging.INFO):
        config = load_config(tmp_path, {"PUPPETEER_EXEC_PATH": "/usr/bin/chromium"})

    assert config.executable_path == Path("/usr/bin/chromium")
    assert "PUPPETEER_EXEC_PATH=/usr/bin/chromium" in caplog.text


def test_reads_load_timeout(tmp_path: Path) -> None:
    """Reads PUPPETEER_LOAD_TIMEOUT_MILLIS as integer milliseconds."""
    config = load_config(tmp_path, {"PUPPETEER_LOAD_TIMEOUT_MILLIS": "500"})

    assert config.load_timeout_ms == 500


def test_zero_load_timeout_disables_timeout(tmp_path: Path) -> None:
    """Passes 0 through, which waits for the load event without a bound."""
    config = load_config(tmp_path, {"PUPPETEER_LOAD_TIMEOUT_MILLIS": "0"})

    assert config.load_timeout_ms == 0


@pytest.mark.parametrize("value", ["soon", "1.5", "-10"])
def test_rejects_invalid_load_timeout(tmp_path: Path, value: str) -> None:
    """Raises ConfigurationError for timeouts that are not non-negative integers."""
    with pytest.raises(ConfigurationError, match="load_timeout_ms"):
        load_config(tmp_path, {"PUPPETEER_LOAD_TIMEOUT_MILLIS": value})


def test_reads_bundler_and_reporter_dir(tmp_path: Path) -> None:
    """Splits HARNESS_BUNDLER and reads HARNESS_REPORTER_DIR."""
    config = load_config(
        tmp_path,
        {
            "HARNESS_BUNDLER": "npx esbuild --log-level=warning",
            "HARNESS_REPORTER_DIR": "/opt/mocha",
        },
    )

    assert tuple(config.bundler) == ("npx", "esbuild", "--log-level=warning")
    assert config.reporter_dir == Path("/opt/mocha")


def test_overrides_suffix(tmp_path: Path) -> None:
    """Uses the given test suffix."""
    assert load_config(tmp_path, {}, ".spec.js").test_suffix == ".spec.js"


def test_config_is_frozen(tmp_path: Path) -> None:
    """Configuration cannot be mutated after creation."""
    config = HarnessConfig(root=tmp_path)

    with pytest.raises(ValueError, match="frozen"):
        config.load_timeout_ms = 1  # type: ignore[misc]


def test_config_rejects_unknown_fields(tmp_path: Path) -> None:
    """Misspelled settings are reported instead of ignored."""
    with pytest.raises(ValueError, match="load_timeout"):
        HarnessConfig(root=tmp_path, load_timeout=5)  # type: ignore[call-arg]
