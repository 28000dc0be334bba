"""Asynchronous row streams over cooperatively stepped SQL statements."""

from stepcursor.engine import SQLiteStatement, Statement, StepResult, Waker, open_rows
from stepcursor.errors import (
    ColumnIndexError,
    ConversionError,
    EngineError,
    ExecutionError,
    ExecutionInterruptedError,
    ExecutionLockedError,
    LockError,
    StepCursorError,
    UnknownColumnError,
)
from stepcursor.row import ColumnName, Position, Row, RowIndex, as_row_index
from stepcursor.stream import PENDING, NextRow, Rows, StatementHandle
from stepcursor.value import Value, ValueKind

__all__ = [
    "PENDING",
    "ColumnIndexError",
    "ColumnName",
    "ConversionError",
    "EngineError",
    "ExecutionError",
    "ExecutionInterruptedError",
    "ExecutionLockedError",
    "LockError",
    "NextRow",
    "Position",
    "Row",
    "RowIndex",
    "Rows",
    "SQLiteStatement",
    "Statement",
    "StatementHandle",
    "StepCursorError",
    "StepResult",
    "UnknownColumnError",
    "Value",
    "ValueKind",
    "Waker",
    "as_row_index",
    "open_rows",
]
