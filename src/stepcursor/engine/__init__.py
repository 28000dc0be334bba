"""Execution engine boundary and the SQLite-backed implementation."""

from stepcursor.engine.backend import Statement, StepResult, Waker
from stepcursor.engine.sqlite_backend import SQLiteStatement, open_rows

__all__ = ["SQLiteStatement", "Statement", "StepResult", "Waker", "open_rows"]
