"""Integration tests for the dev server with stand-in child processes."""

import io
from pathlib import Path

import pytest

from browser_test_harness.errors import ServingError
from browser_test_harness.servers.dev_server import DevServer, DevServerConfig
from browser_test_harness.testing.payloads import python_command

# Prints the readiness text in two writes, then serves until terminated
SPLIT_READY_SOURCE = """
import sys, time
sys.stdout.write("Server running")
sys.stdout.flush()
time.sleep(0.2)
sys.stdout.write(" at http://localhost:" + sys.argv[sys.argv.index("--port") + 1] + "\\n")
sys.stdout.flush()
time.sleep(60)
"""

CRASH_SOURCE = """
import sys
print("Build failed: cannot resolve ./missing")
sys.exit(3)
"""

IGNORE_TERM_SOURCE = """
import signal, sys, time
signal.signal(signal.SIGTERM, signal.SIG_IGN)
print("Server running at http://localhost:1234", flush=True)
time.sleep(60)
"""


@pytest.fixture
def document(tmp_path: Path) -> Path:
    """Harness document on disk."""
    path = tmp_path / "harness.html"
    path.write_text("<!DOCTYPE html>")
    return path


async def test_ready_when_text_split_across_chunks(document: Path) -> None:
    """Detects the readiness text spread over several writes."""
    output = io.StringIO()
    config = DevServerConfig(command=python_command(SPLIT_READY_SOURCE), port=4321)

    async with DevServer.from_config(config, document, output=output) as server:
        await server.wait_until_ready()

        assert server.ready.is_set()
        assert str(server.url) == "http://localhost:4321/"
        assert "Server running at http://localhost:4321" in output.getvalue()

    assert server.process.returncode is not None
    assert server.relay.done()


async def test_ready_on_clean_exit(document: Path) -> None:
    """Treats exit code 0 without the readiness text as ready."""
    config = DevServerConfig(command=python_command("pass"))

    async with DevServer.from_config(config, document, output=io.StringIO()) as server:
        await server.wait_until_ready()

        assert server.process.returncode == 0


async def test_raises_when_exiting_before_ready(document: Path) -> None:
    """Raises ServingError with the exit code and relays the output."""
    output = io.StringIO()
    config = DevServerConfig(command=python_command(CRASH_SOURCE))

    with pytest.raises(ServingError, match="exited with code 3"):
        async with DevServer.from_config(config, document, output=output) as server:
            await server.wait_until_ready()

    assert "cannot resolve ./missing" in output.getvalue()


async def test_kills_server_ignoring_terminate(document: Path) -> None:
    """Kills the dev server when it outlives the stop timeout."""
    config = DevServerConfig(
        command=python_command(IGNORE_TERM_SOURCE), stop_timeout=0.5
    )

    async with DevServer.from_config(config, document, output=io.StringIO()) as server:
        await server.wait_until_ready()

    assert server.process.returncode is not None


async def test_raises_when_command_missing(document: Path) -> None:
    """Raises ServingError when the dev server executable does not exist."""
    config = DevServerConfig(command=("definitely-not-a-dev-server",))

    with pytest.raises(ServingError, match="not found"):
        async with DevServer.from_config(config, document):
            pass  # pragma: no cover
