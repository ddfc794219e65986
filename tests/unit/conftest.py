"""Fixtures for unit tests."""

from pathlib import Path

import pytest

from browser_test_harness.config import HarnessConfig


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Create a project with reporter assets and two test files."""
    reporter_dir = tmp_path / "node_modules" / "mocha"
    reporter_dir.mkdir(parents=True)
    (reporter_dir / "mocha.js").write_text("window.mocha = {};\n")
    (reporter_dir / "mocha.css").write_text("#mocha {}\n")

    (tmp_path / "a.test.ts").write_text('describe("a", () => {});\n')
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "b.test.ts").write_text('describe("b", () => {});\n')
    return tmp_path


@pytest.fixture
def harness_config(project_root: Path) -> HarnessConfig:
    """Harness configuration rooted at the test project."""
    return HarnessConfig(root=project_root)
