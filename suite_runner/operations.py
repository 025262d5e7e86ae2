"""Normalization of test operations into zero-argument callables.

An operation is either awaitable-style (called with no arguments, returning
an awaitable or a plain value) or callback-style (called with a single
``done(error=None, result=None)`` completion callback). The style is resolved
once at registration and callback-style operations are adapted so the engine
only ever deals with the first shape.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any

from suite_runner.timeout import OperationCancelledError

type Operation = Callable[[], Awaitable[Any] | Any]
type Done = Callable[..., None]


class OperationStyle(StrEnum):
    """How an operation reports completion."""

    AWAITABLE = "awaitable"
    CALLBACK = "callback"


class CallbackError(Exception):
    """Wraps a non-exception error value passed to a completion callback."""

    def __init__(self, value: object) -> None:
        super().__init__(repr(value))
        self.value = value


def operation_style(fn: Callable[..., Any]) -> OperationStyle:
    """Return CALLBACK if fn declares exactly one required positional parameter."""
    try:
        parameters = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return OperationStyle.AWAITABLE

    required = [
        p
        for p in parameters
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        and p.default is p.empty
    ]
    return OperationStyle.CALLBACK if len(required) == 1 else OperationStyle.AWAITABLE


def adapt_callback(fn: Callable[[Done], Any]) -> Operation:
    """Adapt a callback-style operation into an awaitable-style one."""

    async def operation() -> Any:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()

        def settle(error: object, result: Any) -> None:
            if future.done():
                return
            if error is None:
                future.set_result(result)
            elif isinstance(error, BaseException):
                future.set_exception(error)
            else:
                future.set_exception(CallbackError(error))

        def done(error: object = None, result: Any = None) -> None:
            loop.call_soon_threadsafe(settle, error, result)

        def fail_early(task: asyncio.Future[Any]) -> None:
            if task.cancelled():
                if not future.done():
                    future.set_exception(OperationCancelledError())
                return
            if (error := task.exception()) is not None and not future.done():
                future.set_exception(error)

        body: asyncio.Future[Any] | None = None
        if inspect.isawaitable(outcome := fn(done)):
            # async callback-style bodies start running right away
            body = asyncio.ensure_future(outcome)
            body.add_done_callback(fail_early)

        try:
            return await future
        except asyncio.CancelledError:
            if body is not None:
                body.cancel()
            raise

    return operation


def resolve_operation(fn: Callable[..., Any]) -> tuple[OperationStyle, Operation]:
    """Resolve the style of fn and return it with its zero-argument form."""
    style = operation_style(fn)
    if style is OperationStyle.CALLBACK:
        return style, adapt_callback(fn)
    return style, fn


async def invoke(operation: Operation) -> Any:
    """Call an operation, awaiting its result when it returns an awaitable."""
    result = operation()
    if inspect.isawaitable(result):
        return await result
    return result
