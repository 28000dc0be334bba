"""Exception types raised by row streams and rows."""

from __future__ import annotations


class StepCursorError(Exception):
    """Base class for every error raised by stepcursor."""


class LockError(StepCursorError):
    """The statement guard is poisoned and can no longer be acquired."""


class ExecutionError(StepCursorError):
    """The execution engine reported a failure while stepping."""


class ExecutionLockedError(ExecutionError):
    """The engine reported contention on the underlying database."""

    def __init__(self, message: str = "database is locked") -> None:
        """Initialize with the engine's message."""
        super().__init__(message)


class ExecutionInterruptedError(ExecutionError):
    """The engine reported that execution was interrupted."""

    def __init__(self, message: str = "interrupted") -> None:
        """Initialize with the engine's message."""
        super().__init__(message)


class EngineError(StepCursorError):
    """Any other failure raised by the engine; the underlying exception is chained."""


class UnknownColumnError(StepCursorError, LookupError):
    """No column with the requested name exists in the row."""

    def __init__(self, name: str) -> None:
        """Initialize with the missing column name."""
        super().__init__(f"unknown column name: {name!r}")
        self.name = name


class ColumnIndexError(StepCursorError, IndexError):
    """A positional column lookup fell outside the row."""

    def __init__(self, index: int) -> None:
        """Initialize with the offending index."""
        super().__init__(f"column index out of range: {index}")
        self.index = index


class ConversionError(StepCursorError, ValueError):
    """A value could not be represented as the requested type."""
