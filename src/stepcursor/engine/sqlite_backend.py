"""SQLite implementation of the Statement protocol.

Thin adapter over an aiosqlite cursor. aiosqlite runs every sqlite3 call
on its own worker thread, so a step never blocks the event loop: the first
step schedules a ``fetchone()`` and reports IO, and the fetch's completion
wakes whoever is waiting on the statement.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from stepcursor.engine.backend import StepResult, Waker
from stepcursor.errors import ExecutionInterruptedError, ExecutionLockedError

if TYPE_CHECKING:
    import aiosqlite

    from stepcursor.stream import Rows

logger = logging.getLogger(__name__)


def _classify_error(exc: BaseException) -> StepResult | None:
    """Map a sqlite3 failure to BUSY/INTERRUPT, or None if it is neither."""
    if not isinstance(exc, sqlite3.OperationalError):
        return None
    message = str(exc).lower()
    if "database is locked" in message or "database is busy" in message:
        return StepResult.BUSY
    if "interrupted" in message:
        return StepResult.INTERRUPT
    return None


class SQLiteStatement:
    """Steps an executed aiosqlite cursor one row at a time.

    At most one ``fetchone()`` is outstanding. Every waker handed in while
    it runs is called when it completes.
    """

    def __init__(self, cursor: aiosqlite.Cursor) -> None:
        """Initialize with an executed aiosqlite cursor."""
        self._cursor = cursor
        self._names = [d[0] for d in cursor.description or ()]
        self._pending: asyncio.Future[Any] | None = None
        self._wakers: list[Waker] = []
        self._current: tuple[Any, ...] | None = None
        self._done = False

    @classmethod
    async def prepare(
        cls,
        conn: aiosqlite.Connection,
        sql: str,
        params: tuple[Any, ...] | list[Any] = (),
    ) -> SQLiteStatement:
        """Execute ``sql`` on ``conn`` and wrap the resulting cursor."""
        try:
            cursor = await conn.execute(sql, params)
        except sqlite3.OperationalError as exc:
            kind = _classify_error(exc)
            if kind is StepResult.BUSY:
                raise ExecutionLockedError() from exc
            if kind is StepResult.INTERRUPT:
                raise ExecutionInterruptedError() from exc
            raise
        return cls(cursor)

    def step(self, waker: Waker) -> StepResult:
        """Advance one step; see the module docstring."""
        if self._done:
            return StepResult.DONE
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._cursor.fetchone())
            self._pending.add_done_callback(self._wake_all)
        if not self._pending.done():
            self._wakers.append(waker)
            return StepResult.IO

        fetch, self._pending = self._pending, None
        exc = fetch.exception()
        if exc is not None:
            kind = _classify_error(exc)
            if kind is None:
                raise exc
            logger.debug("SQLite step reported %s: %s", kind, exc)
            return kind
        row = fetch.result()
        if row is None:
            self._done = True
            self._current = None
            return StepResult.DONE
        self._current = tuple(row)
        return StepResult.ROW

    def run_once(self) -> None:
        """No-op: the aiosqlite worker thread services the pending fetch."""

    def row(self) -> Sequence[Any]:
        """Values of the current row."""
        if self._current is None:
            raise RuntimeError("no current row")
        return self._current

    def num_columns(self) -> int:
        """Number of result columns."""
        return len(self._names)

    def column_name(self, index: int) -> str:
        """Name of the result column at ``index``."""
        return self._names[index]

    def _wake_all(self, _fetch: asyncio.Future[Any]) -> None:
        wakers, self._wakers = self._wakers, []
        for waker in wakers:
            waker()


async def open_rows(
    conn: aiosqlite.Connection,
    sql: str,
    params: tuple[Any, ...] | list[Any] = (),
) -> Rows:
    """Execute ``sql`` on ``conn`` and return a row stream over its results."""
    from stepcursor.stream import Rows

    statement = await SQLiteStatement.prepare(conn, sql, params)
    return Rows(statement)
