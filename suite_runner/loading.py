"""Loading of suite factories from entry points or import paths."""

from collections.abc import Callable
from importlib.metadata import EntryPoint, entry_points
from typing import Any

ENTRY_POINT_GROUP = "suite_runner.suites"

type SuiteFactory = Callable[..., Any]


class SuiteNotFoundError(Exception):
    """Raised when a suite target cannot be resolved."""


def load_suite_factory(target: str) -> SuiteFactory:
    """Load the callable that registers a suite's tests.

    Args:
        target: Either an entry point name registered under the
            ``suite_runner.suites`` group, or an import path of the form
            ``package.module:attribute``

    Returns:
        A callable taking the TestSuite to register tests on

    Raises:
        SuiteNotFoundError: If the target cannot be found or is not callable

    """
    entries = entry_points(group=ENTRY_POINT_GROUP)

    for entry in entries:
        if entry.name == target:
            return _ensure_callable(target, entry.load())

    if ":" not in target:
        available = [e.name for e in entries]
        raise SuiteNotFoundError(
            f"Suite '{target}' not found. Available suites: {available}"
        )

    entry = EntryPoint(name=target, value=target, group=ENTRY_POINT_GROUP)
    try:
        factory = entry.load()
    except (ImportError, AttributeError) as err:
        raise SuiteNotFoundError(
            f"Suite '{target}' could not be loaded: {err}"
        ) from err
    return _ensure_callable(target, factory)


def _ensure_callable(target: str, factory: object) -> SuiteFactory:
    if not callable(factory):
        raise SuiteNotFoundError(f"Suite '{target}' is not callable")
    return factory
