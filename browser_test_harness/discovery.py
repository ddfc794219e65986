"""Locate test source files below a root directory."""

import logging
import os
from collections.abc import Collection, Iterator, Sequence
from pathlib import Path

from browser_test_harness.errors import DiscoveryError

log = logging.getLogger(__name__)


def find_test_files(
    root: Path,
    suffix: str,
    exclude: Collection[str] = (),
) -> Sequence[Path]:
    """Recursively collect files whose name ends with ``suffix``.

    Entries are visited depth-first in name order, so the result is stable for
    a given tree. Directory symlinks are not followed.

    Args:
        root: Directory to search
        suffix: Test file name suffix (e.g., ".test.ts")
        exclude: Directory names that are never descended into

    Returns:
        Test file paths in traversal order

    Raises:
        DiscoveryError: If a directory cannot be listed

    """
    return list(_walk(root, suffix, frozenset(exclude)))


def _walk(directory: Path, suffix: str, exclude: frozenset[str]) -> Iterator[Path]:
    try:
        with os.scandir(directory) as scan:
            entries = sorted(scan, key=lambda entry: entry.name)
    except OSError as error:
        raise DiscoveryError(
            f"Cannot list directory {directory}: {error.strerror or error}"
        ) from error

    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            if entry.name in exclude:
                log.debug("Skipping excluded directory %s", entry.path)
                continue
            yield from _walk(Path(entry.path), suffix, exclude)
        elif entry.is_file() and entry.name.endswith(suffix):
            yield Path(entry.path)
