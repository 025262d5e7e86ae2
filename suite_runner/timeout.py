"""Race an awaitable against a deadline."""

import asyncio
import logging
from collections.abc import Awaitable

log = logging.getLogger(__name__)


class OperationTimeoutError(TimeoutError):
    """Raised when an operation does not settle before its deadline."""

    def __init__(self, timeout: float) -> None:
        super().__init__("Operation timed out")
        self.timeout = timeout


class OperationCancelledError(Exception):
    """Raised when an operation ends by cancelling itself."""

    def __init__(self) -> None:
        super().__init__("Operation was cancelled")


async def with_timeout[T](operation: Awaitable[T], timeout: float | None) -> T:
    """Await an operation, failing if it takes longer than timeout seconds.

    When the deadline wins, the operation is abandoned: cancellation is
    requested but never awaited, and whatever it settles with afterwards is
    discarded. A cancellation raised from inside the operation is reported
    as OperationCancelledError, while cancelling the caller still propagates.

    Args:
        operation: The awaitable to run
        timeout: Seconds to wait, or None to wait indefinitely

    Returns:
        The operation's result

    Raises:
        OperationTimeoutError: If the deadline passes first
        OperationCancelledError: If the operation cancelled itself

    """
    task = asyncio.ensure_future(operation)
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout)
    except asyncio.CancelledError:
        task.cancel()
        raise

    if task in done:
        if task.cancelled():
            raise OperationCancelledError()
        return task.result()

    log.debug("Abandoning operation after %.3fs", timeout)
    task.add_done_callback(_discard_outcome)
    task.cancel()
    raise OperationTimeoutError(timeout)


def _discard_outcome(task: asyncio.Future[object]) -> None:
    """Consume the outcome of an abandoned task so it is never reported."""
    if task.cancelled():
        return
    if (error := task.exception()) is not None:
        log.debug("Abandoned operation failed late: %r", error)
