"""Server manifest definition for the plugin system."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import BaseModel

from browser_test_harness.servers.base import HarnessServer

ConfigT = TypeVar("ConfigT", bound=BaseModel)


@dataclass(frozen=True, kw_only=True)
class ServerManifest(Generic[ConfigT]):
    """Manifest describing a serving strategy.

    The factory receives the strategy's configuration and the harness document
    path. Strategies with ``bundles_sources`` bundle the entry module linked
    from the document themselves, so the harness skips its own bundler.
    """

    config_cls: type[ConfigT]
    server_factory: Callable[
        [ConfigT, Path], AbstractAsyncContextManager[HarnessServer]
    ]
    bundles_sources: bool = False
