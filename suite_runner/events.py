"""Lifecycle events emitted by a test suite and a typed emitter for them."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum


class SuiteEvent(StrEnum):
    """Every event a suite can emit."""

    SUITE_START = "suite-start"
    SUITE_PASS = "suite-pass"
    SUITE_FAIL = "suite-fail"
    START = "start"
    END = "end"
    START_SECTION = "start-section"
    END_SECTION = "end-section"
    PASS = "pass"
    FAIL = "fail"
    RUN_START = "run-start"
    RUN_END = "run-end"
    RUN_PASS = "run-pass"
    RUN_FAIL = "run-fail"


@dataclass(frozen=True, kw_only=True)
class Event:
    """A single emitted event.

    ``name`` is set for section events and ``error`` for failure events.
    """

    kind: SuiteEvent
    name: str | None = None
    error: BaseException | None = None


type Listener = Callable[[Event], None]


class EventEmitter:
    """Publish/subscribe channel keyed by SuiteEvent.

    Listeners are called synchronously in subscription order. An exception
    raised by a listener propagates to whoever emitted the event.
    """

    def __init__(self) -> None:
        self._listeners: dict[SuiteEvent, list[Listener]] = {}

    def on(self, kind: SuiteEvent, listener: Listener) -> Listener:
        """Subscribe listener to events of the given kind."""
        self._listeners.setdefault(_check_kind(kind), []).append(listener)
        return listener

    def once(self, kind: SuiteEvent, listener: Listener) -> Listener:
        """Subscribe listener for the next event of the given kind only."""

        def wrapper(event: Event) -> None:
            self.off(kind, wrapper)
            listener(event)

        return self.on(kind, wrapper)

    def off(self, kind: SuiteEvent, listener: Listener) -> None:
        """Unsubscribe listener; does nothing if it was not subscribed."""
        listeners = self._listeners.get(_check_kind(kind), [])
        if listener in listeners:
            listeners.remove(listener)

    def listeners(self, kind: SuiteEvent) -> list[Listener]:
        """Return a copy of the listeners subscribed to kind."""
        return list(self._listeners.get(_check_kind(kind), []))

    def emit(self, event: Event) -> None:
        """Deliver event to every listener subscribed to its kind."""
        for listener in self.listeners(event.kind):
            listener(event)


def _check_kind(kind: SuiteEvent) -> SuiteEvent:
    if not isinstance(kind, SuiteEvent):
        raise TypeError(f"Unknown event kind: {kind!r}")
    return kind
