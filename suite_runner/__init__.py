"""Nested test suite engine with per-item timeouts and lifecycle events."""

from suite_runner.events import Event, EventEmitter, SuiteEvent
from suite_runner.models.options import TestOptions
from suite_runner.suite import SuiteAlreadyStartedError, TestSuite
from suite_runner.timeout import (
    OperationCancelledError,
    OperationTimeoutError,
    with_timeout,
)

__all__ = [
    "Event",
    "EventEmitter",
    "OperationCancelledError",
    "OperationTimeoutError",
    "SuiteAlreadyStartedError",
    "SuiteEvent",
    "TestOptions",
    "TestSuite",
    "with_timeout",
]
