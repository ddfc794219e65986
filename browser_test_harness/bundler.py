"""Bundle discovered test files into one browser script."""

import asyncio
import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from browser_test_harness.errors import BuildError

log = logging.getLogger(__name__)

ENTRY_MODULE_NAME = "entry.js"
BUNDLE_NAME = "bundle.js"


def import_specifier(path: Path, scratch_dir: Path) -> str:
    """Return ``path`` as a relative import specifier resolvable from ``scratch_dir``."""
    relative = Path(os.path.relpath(path.absolute(), scratch_dir.absolute())).as_posix()
    if relative.startswith("../"):
        return relative
    return f"./{relative}"


def render_entry_module(test_files: Sequence[Path], scratch_dir: Path) -> str:
    """Render an entry module with one import statement per test file."""
    return "".join(
        f"import {json.dumps(import_specifier(path, scratch_dir))};\n"
        for path in test_files
    )


def write_entry_module(test_files: Sequence[Path], scratch_dir: Path) -> Path:
    """Write the entry module into ``scratch_dir`` and return its path."""
    scratch_dir.mkdir(parents=True, exist_ok=True)
    entry = scratch_dir / ENTRY_MODULE_NAME
    entry.write_text(render_entry_module(test_files, scratch_dir), encoding="utf-8")
    log.info("Wrote entry module %s (%d import(s))", entry, len(test_files))
    return entry


async def build_bundle(entry: Path, outfile: Path, command: Sequence[str]) -> Path:
    """Bundle ``entry`` and everything it imports into ``outfile``.

    Args:
        entry: Entry module path
        outfile: Bundle output path
        command: Bundler command line prefix (e.g., ["esbuild"])

    Returns:
        The bundle path

    Raises:
        BuildError: If the bundler is missing or exits with a non-zero code

    """
    args = [
        *command,
        str(entry),
        "--bundle",
        "--sourcemap=inline",
        f"--outfile={outfile}",
    ]
    log.info("Bundling %s into %s", entry, outfile)

    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as error:
        raise BuildError(f"Bundler executable not found: {command[0]}") from error

    _, stderr = await process.communicate()

    if process.returncode != 0:
        raise BuildError(
            f"Bundler failed with exit code {process.returncode}: "
            f"{stderr.decode(errors='replace').strip()}"
        )

    return outfile
