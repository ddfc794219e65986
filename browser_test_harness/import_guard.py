"""Reject test files that import the reporter's test globals directly.

Inside the harness page the reporter installs ``describe``/``it`` as browser
globals. A test file that imports them from the reporter module instead pulls
the Node entry point of the reporter into the bundle, which fails once it runs
in the page. The check is a textual match on import syntax, not a parse.
"""

import re
from collections.abc import Sequence
from functools import cache
from pathlib import Path

from browser_test_harness.errors import ConfigurationViolation, DiscoveryError


@cache
def reporter_import_pattern(module: str) -> re.Pattern[str]:
    """Pattern matching value imports of ``module``.

    Matches ``import {...} from "module"``, ``import * as m from "module"``,
    ``import "module"`` and ``require("module")``. Type-only imports are erased
    by the compiler and are not matched.
    """
    quoted = rf"""['"]{re.escape(module)}['"]"""
    return re.compile(
        rf"""^[ \t]*import(?!\s+type\s)\s+(?:[^'";]*?\bfrom\s*)?{quoted}"""
        rf"""|\brequire\(\s*{quoted}\s*\)""",
        re.MULTILINE,
    )


def imports_reporter(source: str, module: str) -> bool:
    """Check whether ``source`` imports from the reporter module."""
    return reporter_import_pattern(module).search(source) is not None


def read_source(path: Path) -> str:
    """Read a test file, replacing bytes that are not valid UTF-8.

    Raises:
        DiscoveryError: If the file cannot be read

    """
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as error:
        raise DiscoveryError(
            f"Cannot read test file {path}: {error.strerror or error}"
        ) from error


def find_forbidden_imports(paths: Sequence[Path], module: str) -> Sequence[Path]:
    """Return the files that import from the reporter module, in input order."""
    return [path for path in paths if imports_reporter(read_source(path), module)]


def check_imports(paths: Sequence[Path], module: str) -> None:
    """Abort when any test file imports from the reporter module.

    Raises:
        ConfigurationViolation: Naming every offending file

    """
    if offending := find_forbidden_imports(paths, module):
        raise ConfigurationViolation(offending, module)
