"""Models for suite execution results."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, kw_only=True)
class SuiteResult:
    """Outcome of a whole suite run."""

    name: str
    status: Literal["passed", "failed"]
    duration: float
    error: str | None = None

    @property
    def passed(self) -> bool:
        """Whether the suite passed."""
        return self.status == "passed"
