"""CLI entry point for the browser test harness."""

import argparse
import asyncio
import json
import logging
import os
import sys
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from browser_test_harness.config import load_config
from browser_test_harness.coordinator import RunCoordinator
from browser_test_harness.errors import ConfigurationError, HarnessError
from browser_test_harness.models.result import RunResult
from browser_test_harness.servers.loading import load_server_manifest

STATUS_SYMBOLS = {
    "success": "✅",
    "failure": "❌",
    "error": "❗",
}


def log_result_summary(log: logging.Logger, result: RunResult) -> None:
    """Log a formatted summary of the run result."""
    log.info("=" * 80)
    log.info("Test Run Summary:")
    log.info("=" * 80)

    symbol = STATUS_SYMBOLS.get(result.status, "?")
    log.info("%s %s (%.2fs)", symbol, result.status, result.duration)
    if result.status == "failure":
        log.error("%d test(s) failed", result.failures)
    if result.message:
        log.info("  Message: %s", result.message)


def format_output(result: RunResult) -> dict[str, Any]:
    """Format the run result for JSON output."""
    return {
        "status": result.status,
        "failures": result.failures,
        "duration": result.duration,
        "message": result.message,
    }


async def run(
    root: Path,
    server_key: str,
    server_config_json: str,
    test_suffix: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Run the browser tests under ``root`` and return the exit code."""
    log = logging.getLogger("browser_test_harness")
    started = time.monotonic()

    try:
        config = load_config(
            root, os.environ if environ is None else environ, test_suffix
        )

        log.info("Loading server: %s", server_key)
        manifest = load_server_manifest(server_key)
        try:
            server_config = manifest.config_cls.model_validate_json(server_config_json)
        except ValidationError as error:
            raise ConfigurationError(
                f"Invalid configuration for server '{server_key}': {error}"
            ) from error

        coordinator = RunCoordinator(
            config=config, server=manifest, server_config=server_config
        )
        result = await coordinator.run()
    except HarnessError as error:
        log.error("Run aborted: %s", error)
        result = RunResult(
            status="error",
            duration=time.monotonic() - started,
            message=str(error),
        )

    log_result_summary(log, result)
    print(json.dumps(format_output(result), indent=2))

    return result.exit_code


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run browser test files in a headless browser"
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=Path.cwd(),
        help="Directory searched for test files (default: current directory)",
    )
    parser.add_argument(
        "--server",
        default="embedded",
        help="Server key (embedded, dev-server)",
    )
    parser.add_argument(
        "--server-config",
        default="{}",
        help="JSON configuration for the server",
    )
    parser.add_argument(
        "--suffix",
        default=None,
        help="Test file name suffix (default: .test.ts)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            root=args.root,
            server_key=args.server,
            server_config_json=args.server_config,
            test_suffix=args.suffix,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
