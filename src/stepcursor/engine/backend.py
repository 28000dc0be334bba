"""Execution engine protocol — what a row stream needs from a statement.

The engine advances a prepared statement one step at a time. A step either
produces a row, finishes, or reports that it cannot make progress yet. When
it reports IO, the engine keeps the waker and calls it once the pending work
has completed, so a suspended reader knows to step again.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

Waker = Callable[[], None]


class StepResult(StrEnum):
    """Outcome of a single engine step."""

    ROW = "row"
    DONE = "done"
    IO = "io"
    BUSY = "busy"
    INTERRUPT = "interrupt"


@runtime_checkable
class Statement(Protocol):
    """A prepared statement that can be stepped cooperatively.

    Not thread-safe on its own; callers serialize access.
    """

    def step(self, waker: Waker) -> StepResult:
        """Advance one step. ``waker`` may be called later, from any thread."""
        ...

    def run_once(self) -> None:
        """Make one unit of progress on pending I/O without blocking."""
        ...

    def row(self) -> Sequence[Any]:
        """Values of the current row; only valid right after ROW."""
        ...

    def num_columns(self) -> int:
        """Number of result columns."""
        ...

    def column_name(self, index: int) -> str:
        """Name of the result column at ``index``."""
        ...
