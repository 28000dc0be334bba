"""Asynchronous row streams over a cooperatively stepped statement.

``NextRow`` drives the statement exactly one step per attempt and suspends
the calling task only when the engine reports IO. ``Rows`` is the public
stream; clones share one statement and therefore one cursor.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import AsyncIterator, Generator, Iterator
from contextlib import contextmanager
from enum import Enum
from typing import Any

from stepcursor.engine.backend import Statement, StepResult, Waker
from stepcursor.errors import (
    EngineError,
    ExecutionInterruptedError,
    ExecutionLockedError,
    LockError,
    StepCursorError,
)
from stepcursor.row import Row
from stepcursor.value import Value

logger = logging.getLogger(__name__)


class _Pending(Enum):
    PENDING = "pending"


PENDING = _Pending.PENDING


class StatementHandle:
    """A statement behind a lock, shared by every clone of a stream.

    A critical section aborted by something other than an ``Exception``
    (KeyboardInterrupt, SystemExit) leaves the statement in an unknown
    state; the handle is then poisoned and refuses further access.
    """

    def __init__(self, statement: Statement) -> None:
        """Initialize with the statement to guard."""
        self._statement = statement
        self._lock = threading.Lock()
        self._poisoned = False

    @property
    def poisoned(self) -> bool:
        """True once a critical section was aborted mid-way."""
        return self._poisoned

    @contextmanager
    def lock(self) -> Iterator[Statement]:
        """Hold exclusive access to the statement for one critical section."""
        with self._lock:
            if self._poisoned:
                raise LockError("statement lock is poisoned")
            try:
                yield self._statement
            except Exception:
                raise
            except BaseException:
                self._poisoned = True
                raise


def _make_waker(loop: asyncio.AbstractEventLoop, woken: asyncio.Future[None]) -> Waker:
    def _set() -> None:
        if not woken.done():
            woken.set_result(None)

    def wake() -> None:
        if loop.is_closed():
            return
        loop.call_soon_threadsafe(_set)

    return wake


class NextRow:
    """Single-step driver that produces the next row of a statement."""

    def __init__(self, handle: StatementHandle) -> None:
        """Initialize with the shared statement handle."""
        self._handle = handle

    def poll(self, waker: Waker) -> Row | None | _Pending:
        """Step the statement once.

        Returns a Row, None when the statement is exhausted, or PENDING after
        servicing pending I/O once. Busy and interrupted steps raise.
        """
        with self._handle.lock() as stmt:
            try:
                result = stmt.step(waker)
                if result is StepResult.ROW:
                    values = tuple(Value.from_native(v) for v in stmt.row())
                    names = tuple(stmt.column_name(i) for i in range(stmt.num_columns()))
                    return Row(values=values, names=names)
                if result is StepResult.DONE:
                    return None
                if result is StepResult.IO:
                    stmt.run_once()
                    return PENDING
            except StepCursorError:
                raise
            except Exception as exc:
                raise EngineError(str(exc)) from exc
        if result is StepResult.BUSY:
            logger.warning("statement step failed: database is locked")
            raise ExecutionLockedError()
        if result is StepResult.INTERRUPT:
            logger.warning("statement step failed: interrupted")
            raise ExecutionInterruptedError()
        raise EngineError(f"unexpected step result: {result!r}")

    async def wait(self) -> Row | None:
        """Poll until the statement yields a row or finishes.

        The lock is released before every suspension; cancelling the wait
        leaves the statement ready for the next reader.
        """
        loop = asyncio.get_running_loop()
        while True:
            woken: asyncio.Future[None] = loop.create_future()
            outcome = self.poll(_make_waker(loop, woken))
            if outcome is not PENDING:
                return outcome
            logger.debug("statement pending I/O, suspending")
            await woken

    def __await__(self) -> Generator[Any, None, Row | None]:
        return self.wait().__await__()


class Rows:
    """Results of a prepared statement, read one row at a time."""

    def __init__(self, statement: Statement | StatementHandle) -> None:
        """Initialize with a statement, or an existing handle to share it."""
        if isinstance(statement, StatementHandle):
            self._handle = statement
        else:
            self._handle = StatementHandle(statement)

    async def advance(self) -> Row | None:
        """Fetch the next row, or None if the statement is exhausted."""
        return await NextRow(self._handle)

    async def fetchall(self) -> list[Row]:
        """Fetch all remaining rows."""
        return [row async for row in self]

    def clone(self) -> Rows:
        """Return a stream sharing this one's statement and cursor."""
        return Rows(self._handle)

    def __copy__(self) -> Rows:
        return self.clone()

    def __aiter__(self) -> AsyncIterator[Row]:
        return self

    async def __anext__(self) -> Row:
        row = await self.advance()
        if row is None:
            raise StopAsyncIteration
        return row
