"""Work items held by the suite engine."""

from dataclasses import dataclass
from enum import StrEnum

from suite_runner.operations import Operation, OperationStyle


class ItemKind(StrEnum):
    """Kind of a registered item."""

    SECTION = "section"
    INLINE = "inline"


@dataclass(frozen=True, kw_only=True)
class TestItem:
    """One unit of work submitted to the engine.

    Sections are named and may register nested items while running. Inline
    items are unnamed leaves.
    """

    __test__ = False

    kind: ItemKind
    name: str
    operation: Operation
    style: OperationStyle
    timeout: float | None


@dataclass(frozen=True, kw_only=True)
class StackFrame:
    """State to restore once a section's nested worklist is exhausted."""

    index: int
    queue: list[TestItem]
    name: str
