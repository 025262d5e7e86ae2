"""Test suite engine running a runtime-discovered tree of sections."""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from suite_runner.events import Event, EventEmitter, SuiteEvent
from suite_runner.models.item import ItemKind, StackFrame, TestItem
from suite_runner.models.options import TestOptions
from suite_runner.operations import invoke, resolve_operation
from suite_runner.timeout import with_timeout

log = logging.getLogger(__name__)

type Options = TestOptions | Mapping[str, Any] | None


class SuiteAlreadyStartedError(RuntimeError):
    """Raised when run() is called on a suite that has already started."""


class TestSuite(EventEmitter):
    """Runs sections and inline items sequentially, depth first.

    Items registered while a section is running become that section's
    children. Nesting is tracked with an explicit stack of suspended
    worklists, so depth is not limited by the interpreter's recursion limit.
    The first failure anywhere stops the run.
    """

    __test__ = False

    def __init__(self, name: str = "tests") -> None:
        super().__init__()
        self.name = name
        self._queue: list[TestItem] = []
        self._stack: list[StackFrame] = []
        self._started = False

    @property
    def started(self) -> bool:
        """Whether run() has been called."""
        return self._started

    @property
    def depth(self) -> int:
        """Current section nesting depth."""
        return len(self._stack)

    def register_section(
        self, name: str, operation: Callable[..., Any], options: Options = None
    ) -> None:
        """Append a named section to the current worklist.

        Args:
            name: Section description
            operation: Zero-argument callable, or a callable taking a single
                ``done(error=None, result=None)`` completion callback
            options: TestOptions or a mapping of its fields

        Raises:
            TypeError: If name is not a string or operation is not callable

        """
        if not isinstance(name, str):
            raise TypeError("The description must be a string")
        self._queue.append(self._build_item(ItemKind.SECTION, name, operation, options))

    def register_inline(
        self, operation: Callable[..., Any], options: Options = None
    ) -> None:
        """Append an unnamed inline item to the current worklist."""
        self._queue.append(self._build_item(ItemKind.INLINE, "", operation, options))

    def section[F: Callable[..., Any]](
        self, name: str, **options: Any
    ) -> Callable[[F], F]:
        """Register the decorated function as a section."""

        def decorator(fn: F) -> F:
            self.register_section(name, fn, options)
            return fn

        return decorator

    def inline[F: Callable[..., Any]](self, **options: Any) -> Callable[[F], F]:
        """Register the decorated function as an inline item."""

        def decorator(fn: F) -> F:
            self.register_inline(fn, options)
            return fn

        return decorator

    async def run(self) -> None:
        """Run every registered item, including those registered while running.

        Raises:
            SuiteAlreadyStartedError: If the suite has already been run
            Exception: The first failure, after the failure events are emitted

        """
        if self._started:
            raise SuiteAlreadyStartedError(f"Suite '{self.name}' has already started")
        self._started = True

        index = 0
        self._emit(SuiteEvent.SUITE_START)

        while True:
            while index >= len(self._queue) and self._stack:
                frame = self._stack.pop()
                index, self._queue = frame.index, frame.queue
                self._emit(SuiteEvent.END_SECTION, name=frame.name)
                self._emit(SuiteEvent.END, name=frame.name)

            if index >= len(self._queue):
                self._emit(SuiteEvent.SUITE_PASS)
                return

            item = self._queue[index]

            if item.kind is ItemKind.INLINE:
                log.debug("Running inline item at depth %d", self.depth)
                self._emit(SuiteEvent.RUN_START)
                try:
                    await self._execute(item)
                except Exception as err:
                    self._emit(SuiteEvent.RUN_FAIL, error=err)
                    self._emit(SuiteEvent.RUN_END)
                    self._emit(SuiteEvent.SUITE_FAIL, error=err)
                    raise
                self._emit(SuiteEvent.RUN_PASS)
                self._emit(SuiteEvent.RUN_END)
                index += 1
                continue

            self._stack.append(
                StackFrame(index=index + 1, queue=self._queue, name=item.name)
            )
            self._queue = []
            index = 0

            log.debug("Running section '%s' at depth %d", item.name, self.depth)
            self._emit(SuiteEvent.START, name=item.name)
            try:
                await self._execute(item)
            except Exception as err:
                self._emit(SuiteEvent.FAIL, name=item.name, error=err)
                self._emit(SuiteEvent.END, name=item.name)
                self._emit(SuiteEvent.SUITE_FAIL, error=err)
                raise

            if self._queue:
                self._emit(SuiteEvent.START_SECTION, name=item.name)
            else:
                self._emit(SuiteEvent.PASS, name=item.name)
                self._emit(SuiteEvent.END, name=item.name)
                frame = self._stack.pop()
                index, self._queue = frame.index, frame.queue

    async def _execute(self, item: TestItem) -> None:
        await with_timeout(invoke(item.operation), item.timeout)

    def _build_item(
        self,
        kind: ItemKind,
        name: str,
        operation: Callable[..., Any],
        options: Options,
    ) -> TestItem:
        if not callable(operation):
            raise TypeError("The test must be a function")

        if options is None:
            options = TestOptions()
        elif not isinstance(options, TestOptions):
            options = TestOptions.model_validate(options)

        style, normalized = resolve_operation(operation)
        return TestItem(
            kind=kind,
            name=name,
            operation=normalized,
            style=style,
            timeout=options.timeout,
        )

    def _emit(
        self,
        kind: SuiteEvent,
        *,
        name: str | None = None,
        error: BaseException | None = None,
    ) -> None:
        self.emit(Event(kind=kind, name=name, error=error))
