"""Abstract base class for servers exposing the harness document."""

from abc import ABC, abstractmethod

from yarl import URL


class HarnessServer(ABC):
    """A started server answering requests with the harness document.

    Servers are created by a manifest's factory, an async context manager whose
    exit stops the server. Readiness can lag behind creation, so callers await
    ``wait_until_ready`` before pointing a browser at ``url``.
    """

    @property
    @abstractmethod
    def url(self) -> URL:
        """URL the harness document is reachable at."""

    async def wait_until_ready(self) -> None:
        """Wait until the server accepts requests.

        Servers that are ready as soon as they are created keep this default.
        """
