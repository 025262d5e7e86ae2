"""Tests for operation style resolution and the callback adapter."""

import asyncio
import threading
from collections.abc import Callable
from typing import Any

import pytest

from suite_runner.operations import (
    CallbackError,
    OperationStyle,
    adapt_callback,
    invoke,
    operation_style,
    resolve_operation,
)
from suite_runner.timeout import OperationCancelledError


def zero() -> None:
    """Zero-argument operation."""


def one(done: Callable[..., None]) -> None:
    """Callback-style operation."""
    done()


def optional(done: Callable[..., None] | None = None) -> None:
    """Operation whose only parameter has a default."""


def two(a: Any, b: Any) -> None:
    """Operation with two required parameters."""


class Bound:
    """Holder for bound method operations."""

    def method(self, done: Callable[..., None]) -> None:
        """Callback-style bound method."""


@pytest.mark.parametrize(
    ("fn", "expected"),
    [
        (zero, OperationStyle.AWAITABLE),
        (one, OperationStyle.CALLBACK),
        (optional, OperationStyle.AWAITABLE),
        (two, OperationStyle.AWAITABLE),
        (lambda done: done(), OperationStyle.CALLBACK),
        (Bound().method, OperationStyle.CALLBACK),
        (print, OperationStyle.AWAITABLE),
    ],
)
def test_operation_style(fn: Callable[..., Any], expected: OperationStyle) -> None:
    """Treats exactly one required positional parameter as callback style."""
    assert operation_style(fn) is expected


def test_resolve_operation_keeps_awaitable_style() -> None:
    """Returns zero-argument operations unchanged."""
    assert resolve_operation(zero) == (OperationStyle.AWAITABLE, zero)


async def test_resolve_operation_adapts_callback_style() -> None:
    """Adapts callback-style operations once, at resolution."""
    style, operation = resolve_operation(lambda done: done(None, "value"))

    assert style is OperationStyle.CALLBACK
    assert await invoke(operation) == "value"


async def test_adapter_fails_with_callback_exception() -> None:
    """Fails with the exception passed to done."""
    operation = adapt_callback(lambda done: done(ValueError("bad")))

    with pytest.raises(ValueError, match="bad"):
        await operation()


async def test_adapter_wraps_non_exception_errors() -> None:
    """Wraps non-exception error values in CallbackError."""
    operation = adapt_callback(lambda done: done("bad things"))

    with pytest.raises(CallbackError) as exc_info:
        await operation()

    assert exc_info.value.value == "bad things"


async def test_adapter_ignores_repeated_completion() -> None:
    """Keeps the first completion and ignores later calls to done."""

    def twice(done: Callable[..., None]) -> None:
        done(None, 1)
        done(RuntimeError("ignored"))
        done(None, 2)

    assert await adapt_callback(twice)() == 1


async def test_adapter_accepts_completion_from_another_thread() -> None:
    """Settles when done is called from a worker thread."""

    def threaded(done: Callable[..., None]) -> None:
        threading.Thread(target=done, args=(None, "from thread")).start()

    result = await asyncio.wait_for(adapt_callback(threaded)(), timeout=1)

    assert result == "from thread"


async def test_adapter_propagates_synchronous_raise() -> None:
    """Fails when the callback-style operation raises before calling done."""

    def raising(done: Callable[..., None]) -> None:
        raise LookupError("early")

    with pytest.raises(LookupError, match="early"):
        await adapt_callback(raising)()


async def test_invoke_handles_sync_and_async() -> None:
    """Awaits coroutine results and passes plain values through."""

    async def coroutine() -> str:
        return "async"

    assert await invoke(lambda: "sync") == "sync"
    assert await invoke(coroutine) == "async"


async def test_adapter_runs_async_callback_body() -> None:
    """Runs the body of an async operation that completes through done."""
    steps: list[str] = []

    async def op(done: Callable[..., None]) -> None:
        await asyncio.sleep(0)
        steps.append("body")
        done(None, "finished")

    assert operation_style(op) is OperationStyle.CALLBACK
    result = await asyncio.wait_for(adapt_callback(op)(), timeout=1)

    assert result == "finished"
    assert steps == ["body"]


async def test_adapter_fails_when_async_body_raises_before_done() -> None:
    """Fails with the error an async body raises before calling done."""

    async def op(done: Callable[..., None]) -> None:
        await asyncio.sleep(0)
        raise ValueError("body failed")

    with pytest.raises(ValueError, match="body failed"):
        await asyncio.wait_for(adapt_callback(op)(), timeout=1)


async def test_adapter_keeps_result_when_async_body_raises_after_done() -> None:
    """Keeps the first completion when the async body fails afterwards."""

    async def op(done: Callable[..., None]) -> None:
        done(None, "early")
        await asyncio.sleep(0)
        raise ValueError("too late")

    assert await asyncio.wait_for(adapt_callback(op)(), timeout=1) == "early"
    await asyncio.sleep(0.01)


async def test_adapter_fails_when_async_body_cancels_itself() -> None:
    """Fails instead of hanging when an async body is cancelled before done."""

    async def op(done: Callable[..., None]) -> None:
        future = asyncio.get_running_loop().create_future()
        future.cancel()
        await future

    with pytest.raises(OperationCancelledError):
        await asyncio.wait_for(adapt_callback(op)(), timeout=1)
