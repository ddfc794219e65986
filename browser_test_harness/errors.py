"""Errors raised while preparing and running the browser test harness."""

from collections.abc import Sequence
from pathlib import Path


class HarnessError(Exception):
    """Base class for failures that abort a harness run."""


class DiscoveryError(HarnessError):
    """Raised when the test root cannot be walked."""


class ConfigurationError(HarnessError):
    """Raised when the harness or server configuration is invalid."""


class ConfigurationViolation(HarnessError):
    """Raised when test files import test globals from the reporter module."""

    def __init__(self, files: Sequence[Path], module: str) -> None:
        self.files = tuple(files)
        self.module = module
        names = ", ".join(str(path) for path in self.files)
        super().__init__(
            f"Importing 'describe' or 'it' from {module} in test files breaks "
            f"browser testing in {names}"
        )


class MissingAssetError(HarnessError):
    """Raised when the reporter's stylesheet or script cannot be found."""


class BuildError(HarnessError):
    """Raised when the bundler fails."""


class ServingError(HarnessError):
    """Raised when the harness document cannot be served."""


class BrowserError(HarnessError):
    """Raised when the headless browser fails outside of the tests themselves."""


class NavigationTimeout(BrowserError):
    """Raised when the harness page does not load within the configured bound."""
