"""Shared test fixtures."""

import aiosqlite
import pytest_asyncio

from stepcursor.engine.backend import StepResult


class ScriptedStatement:
    """Statement that replays a fixed list of step results.

    Records every engine call in ``calls``. ``run_once`` wakes the last
    suspended reader, as a real engine does when its I/O completes, unless
    ``wake_on_run`` is False; then the test calls ``wake()`` itself.
    """

    def __init__(self, script, rows=(), names=("id", "name", "score"), wake_on_run=True):
        self.script = list(script)
        self.rows = [tuple(r) for r in rows]
        self.names = list(names)
        self.wake_on_run = wake_on_run
        self.calls: list[str] = []
        self._waker = None
        self._current = None

    def step(self, waker):
        self.calls.append("step")
        result = self.script.pop(0) if self.script else StepResult.DONE
        if result is StepResult.IO:
            self._waker = waker
        elif result is StepResult.ROW:
            self._current = self.rows.pop(0)
        return result

    def run_once(self):
        self.calls.append("run_once")
        if self.wake_on_run:
            self.wake()

    def wake(self):
        waker, self._waker = self._waker, None
        if waker is not None:
            waker()

    def row(self):
        self.calls.append("row")
        return self._current

    def num_columns(self):
        return len(self.names)

    def column_name(self, index):
        return self.names[index]


@pytest_asyncio.fixture
async def db():
    """In-memory SQLite database with a small scores table."""
    conn = await aiosqlite.connect(":memory:")
    await conn.executescript(
        """
        CREATE TABLE scores (id INTEGER PRIMARY KEY, name TEXT, score REAL, avatar BLOB);
        INSERT INTO scores VALUES (1, 'ada', 9.5, x'010203');
        INSERT INTO scores VALUES (2, 'grace', 8.25, NULL);
        INSERT INTO scores VALUES (3, 'linus', 7.0, x'');
        """
    )
    yield conn
    await conn.close()
