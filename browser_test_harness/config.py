"""Harness configuration assembled from the working directory and environment."""

import logging
import shlex
from collections.abc import Mapping, Sequence
from pathlib import Path

from pydantic import Field, ValidationError

from browser_test_harness.errors import ConfigurationError
from browser_test_harness.models.base import Model

log = logging.getLogger(__name__)

EXEC_PATH_ENV = "PUPPETEER_EXEC_PATH"
LOAD_TIMEOUT_ENV = "PUPPETEER_LOAD_TIMEOUT_MILLIS"
REPORTER_DIR_ENV = "HARNESS_REPORTER_DIR"
BUNDLER_ENV = "HARNESS_BUNDLER"

DEFAULT_LOAD_TIMEOUT_MS = 20000
SCRATCH_DIR_NAME = ".harness"


class HarnessConfig(Model):
    """Settings for a single harness run."""

    root: Path = Field(..., description="Directory searched for test files")
    scratch_dir_name: str = Field(
        default=SCRATCH_DIR_NAME,
        description="Directory under root holding the generated artifacts",
    )
    test_suffix: str = Field(default=".test.ts", description="Test file suffix")
    exclude_dirs: Sequence[str] = Field(
        default=("node_modules", ".git", SCRATCH_DIR_NAME),
        description="Directory names never descended into during discovery",
    )
    reporter_module: str = Field(
        default="mocha", description="Module providing the in-browser reporter"
    )
    reporter_dir: Path | None = Field(
        default=None,
        description="Directory holding the reporter assets (None means search "
        "node_modules above root)",
    )
    reporter: str = Field(default="spec", description="Reporter output format")
    ui: str = Field(default="bdd", description="Test definition interface")
    bundler: Sequence[str] = Field(
        default=("esbuild",), description="Bundler command line prefix"
    )
    executable_path: Path | None = Field(
        default=None, description="Browser executable override"
    )
    load_timeout_ms: int = Field(
        default=DEFAULT_LOAD_TIMEOUT_MS,
        ge=0,
        description="Navigation timeout in milliseconds (0 disables it)",
    )

    @property
    def scratch_dir(self) -> Path:
        """Directory for the entry module, bundle and harness document."""
        return self.root / self.scratch_dir_name


def load_config(
    root: Path,
    environ: Mapping[str, str],
    test_suffix: str | None = None,
) -> HarnessConfig:
    """Build the harness configuration for ``root`` from environment overrides.

    Raises:
        ConfigurationError: If an override does not validate

    """
    values: dict[str, object] = {"root": root.absolute()}
    if test_suffix:
        values["test_suffix"] = test_suffix

    if exec_path := environ.get(EXEC_PATH_ENV):
        log.info("%s=%s", EXEC_PATH_ENV, exec_path)
        values["executable_path"] = exec_path

    if load_timeout := environ.get(LOAD_TIMEOUT_ENV):
        log.info("Using %s=%s", LOAD_TIMEOUT_ENV, load_timeout)
        values["load_timeout_ms"] = load_timeout

    if reporter_dir := environ.get(REPORTER_DIR_ENV):
        values["reporter_dir"] = reporter_dir

    if bundler := environ.get(BUNDLER_ENV):
        values["bundler"] = tuple(shlex.split(bundler))

    try:
        return HarnessConfig.model_validate(values)
    except ValidationError as error:
        raise ConfigurationError(f"Invalid harness configuration: {error}") from error
