"""Reporters rendering a suite's event stream through logging."""

import logging
import time
import traceback
from collections.abc import Callable

from suite_runner.durations import format_duration
from suite_runner.events import Event, SuiteEvent
from suite_runner.models.result import SuiteResult
from suite_runner.suite import TestSuite

PASS_SYMBOL = "✓"
FAIL_SYMBOL = "✗"
SECTION_SYMBOL = "•"
INDENT = "  "


def error_to_string(error: object) -> str:
    """Render an error, preferring its traceback when it is self-consistent."""
    if not isinstance(error, BaseException):
        return repr(error)

    summary = f"{type(error).__name__}: {error}" if str(error) else type(error).__name__
    if error.__traceback__ is not None:
        stack = "".join(traceback.format_exception(error)).rstrip("\n")
        if type(error).__name__ in stack and str(error) in stack:
            return stack
    return summary


class LoggingReporter:
    """Logs an indented tree of section and inline item results."""

    def __init__(
        self, log: logging.Logger, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.log = log
        self.clock = clock
        self._indent: list[str] = []
        self._start = clock()

    def attach(self, suite: TestSuite) -> None:
        """Subscribe to the events this reporter renders."""
        suite.on(SuiteEvent.START_SECTION, self._on_start_section)
        suite.on(SuiteEvent.END_SECTION, self._on_end_section)
        suite.on(SuiteEvent.START, self._restart_clock)
        suite.on(SuiteEvent.RUN_START, self._restart_clock)
        suite.on(SuiteEvent.PASS, self._on_pass)
        suite.on(SuiteEvent.FAIL, self._on_fail)
        suite.on(SuiteEvent.RUN_FAIL, self._on_fail)

    @property
    def prefix(self) -> str:
        """Indentation for the current nesting level."""
        return "".join(self._indent)

    def _on_start_section(self, event: Event) -> None:
        self.log.info("%s %s %s", self.prefix, SECTION_SYMBOL, event.name)
        self._indent.append(INDENT)

    def _on_end_section(self, event: Event) -> None:
        if self._indent:
            self._indent.pop()

    def _restart_clock(self, event: Event) -> None:
        self._start = self.clock()

    def _elapsed(self) -> str:
        return format_duration(self.clock() - self._start)

    def _on_pass(self, event: Event) -> None:
        self.log.info(
            "%s %s %s (%s)", self.prefix, PASS_SYMBOL, event.name, self._elapsed()
        )

    def _on_fail(self, event: Event) -> None:
        label = event.name if event.kind is SuiteEvent.FAIL else "run"
        self.log.error(
            "%s %s %s (%s)", self.prefix, FAIL_SYMBOL, label, self._elapsed()
        )
        details = error_to_string(event.error)
        margin = f"{self.prefix}   "
        self.log.error("%s", "\n".join(margin + line for line in details.splitlines()))


class ExitStatusReporter:
    """Records the suite outcome exactly once and maps it to an exit code."""

    def __init__(
        self,
        log: logging.Logger,
        name: str = "tests",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.log = log
        self.name = name
        self.clock = clock
        self.result: SuiteResult | None = None
        self._start = clock()

    def attach(self, suite: TestSuite) -> None:
        """Subscribe to the suite-level events."""
        self.name = suite.name or self.name
        suite.on(SuiteEvent.SUITE_START, self._on_start)
        suite.on(SuiteEvent.SUITE_PASS, self._on_finish)
        suite.on(SuiteEvent.SUITE_FAIL, self._on_finish)

    @property
    def exit_code(self) -> int:
        """0 if the suite passed, 1 if it failed or has not finished."""
        return 0 if self.result is not None and self.result.passed else 1

    def _on_start(self, event: Event) -> None:
        self._start = self.clock()

    def _on_finish(self, event: Event) -> None:
        if self.result is not None:
            raise RuntimeError(
                f"Suite '{self.name}' already reported {self.result.status}"
            )

        duration = self.clock() - self._start
        self.log.info("Total duration %s", format_duration(duration))

        if event.kind is SuiteEvent.SUITE_PASS:
            self.result = SuiteResult(
                name=self.name, status="passed", duration=duration
            )
        else:
            self.result = SuiteResult(
                name=self.name,
                status="failed",
                duration=duration,
                error=str(event.error) if event.error is not None else None,
            )
