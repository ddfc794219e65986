"""Models for harness run results."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, kw_only=True)
class RunResult:
    """Terminal outcome of one harness run.

    ``failure`` means the reporter ran to completion and counted failing tests,
    ``error`` means the run was aborted before the reporter could finish.
    """

    status: Literal["success", "failure", "error"]
    duration: float
    failures: int = 0
    message: str | None = None

    @property
    def exit_code(self) -> int:
        """Process exit code for this result."""
        return 0 if self.status == "success" else 1
