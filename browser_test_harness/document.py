"""Render the HTML page that wires the reporter and the bundled tests together."""

import html
import json
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from browser_test_harness.errors import MissingAssetError

log = logging.getLogger(__name__)

HARNESS_DOCUMENT_NAME = "harness.html"

HARNESS_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <title>Mocha Tests</title>
    <meta charset="utf-8">
    {stylesheet}
</head>
<body>
<div id="mocha"></div>
{reporter_script}
<script type="text/javascript">mocha.setup({ui});</script>
{test_script}
</body>
</html>
"""


@dataclass(frozen=True, kw_only=True)
class ReporterAssets:
    """Stylesheet and browser script of the in-page reporter."""

    stylesheet: Path
    script: Path

    @classmethod
    def locate(
        cls, root: Path, module: str, directory: Path | None = None
    ) -> "ReporterAssets":
        """Find ``<module>.css`` and ``<module>.js`` for the reporter.

        Args:
            root: Directory the lookup of node_modules starts from
            module: Reporter module name (e.g., "mocha")
            directory: Explicit asset directory, skipping the lookup

        Raises:
            MissingAssetError: If the directory or either asset is missing

        """
        if directory is None:
            directory = find_module_dir(root, module)

        assets = cls(
            stylesheet=directory / f"{module}.css",
            script=directory / f"{module}.js",
        )
        missing = [
            str(path) for path in (assets.stylesheet, assets.script) if not path.is_file()
        ]
        if missing:
            raise MissingAssetError(f"Reporter assets not found: {', '.join(missing)}")
        return assets


def find_module_dir(root: Path, module: str) -> Path:
    """Find ``node_modules/<module>`` in ``root`` or the nearest parent holding it."""
    start = root.absolute()
    for directory in (start, *start.parents):
        candidate = directory / "node_modules" / module
        if candidate.is_dir():
            log.debug("Using %s assets from %s", module, candidate)
            return candidate
    raise MissingAssetError(f"Cannot find node_modules/{module} in {start} or above")


def _escape_script(source: str) -> str:
    # End tags match case-insensitively
    return re.sub(r"</(script)", r"<\\/\1", source, flags=re.IGNORECASE)


def _relative_url(path: Path, base_dir: Path) -> str:
    relative = Path(os.path.relpath(path.absolute(), base_dir.absolute())).as_posix()
    return html.escape(relative, quote=True)


def render_harness_document(
    assets: ReporterAssets,
    script: Path,
    *,
    inline: bool,
    base_dir: Path,
    ui: str = "bdd",
) -> str:
    """Render the harness document.

    Inlined documents are self-contained and can be answered for any request
    path. Linked documents reference the assets relative to ``base_dir``, where
    the document is written, and load ``script`` as an ES module so a dev server
    can bundle it.
    """
    if inline:
        stylesheet = f"<style>\n{assets.stylesheet.read_text(encoding='utf-8')}\n</style>"
        reporter_script = (
            '<script type="text/javascript">\n'
            f"{_escape_script(assets.script.read_text(encoding='utf-8'))}\n"
            "</script>"
        )
        test_script = (
            '<script type="text/javascript">\n'
            f"{_escape_script(script.read_text(encoding='utf-8'))}\n"
            "</script>"
        )
    else:
        stylesheet = (
            f'<link rel="stylesheet" href="{_relative_url(assets.stylesheet, base_dir)}">'
        )
        reporter_script = (
            '<script type="text/javascript" '
            f'src="{_relative_url(assets.script, base_dir)}"></script>'
        )
        test_script = (
            f'<script type="module" src="{_relative_url(script, base_dir)}"></script>'
        )

    return HARNESS_TEMPLATE.format(
        stylesheet=stylesheet,
        reporter_script=reporter_script,
        ui=json.dumps(ui),
        test_script=test_script,
    )


def write_harness_document(document: str, path: Path) -> Path:
    """Write the harness document and return its path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document, encoding="utf-8")
    log.info("Wrote harness document %s", path)
    return path
