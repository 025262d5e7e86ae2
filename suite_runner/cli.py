"""CLI entry point for running a test suite."""

import argparse
import asyncio
import inspect
import json
import logging
import sys
from dataclasses import asdict

from suite_runner.loading import SuiteFactory, load_suite_factory
from suite_runner.models.result import SuiteResult
from suite_runner.reporting import ExitStatusReporter, LoggingReporter
from suite_runner.suite import TestSuite

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


async def run_suite(factory: SuiteFactory, name: str = "tests") -> SuiteResult:
    """Build a suite, let factory register its tests, run it and report.

    A failing suite is reported through the returned result, not raised.
    """
    log = logging.getLogger("suite_runner")

    suite = TestSuite(name)
    LoggingReporter(log).attach(suite)
    exit_reporter = ExitStatusReporter(log, name)
    exit_reporter.attach(suite)

    registration = factory(suite)
    if inspect.isawaitable(registration):
        await registration

    try:
        await suite.run()
    except Exception as err:
        log.debug("Suite %s stopped at first failure: %r", name, err)

    if exit_reporter.result is None:  # pragma: no cover
        raise RuntimeError(f"Suite '{name}' finished without an outcome")
    return exit_reporter.result


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Run a nested test suite")
    parser.add_argument(
        "target",
        help="Entry point name or 'package.module:function' registering the tests",
    )
    parser.add_argument(
        "--name",
        default="tests",
        help="Suite name used when reporting the outcome",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=LOG_LEVELS,
        type=str.upper,
        help="Logging level",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    factory = load_suite_factory(args.target)
    result = asyncio.run(run_suite(factory, args.name))

    print(json.dumps(asdict(result), indent=2))
    sys.exit(0 if result.passed else 1)


if __name__ == "__main__":  # pragma: no cover
    main()
