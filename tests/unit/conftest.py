"""In-memory DB-API 2.0 doubles shared by the unit tests.

Responses are scripted per command text::

    connection = FakeConnection({"dbo.SpGetCustomer": {"sets": [(["id"], [(1,)])], "outputs": {1: 42}}})

Keys of a response:

- ``sets``: list of ``(column_names, rows)`` result sets.
- ``rowcount``: value reported by ``cursor.rowcount``.
- ``outputs``: ``{argument index: value}`` written into the sequence ``callproc`` returns.
- ``error``: exception raised by ``execute`` or ``callproc``.
"""

from __future__ import annotations

from typing import Any

import pytest

from dbfunc.adapters.dbapi import DbApiDatabase


class FakeCursor:
    """Cursor without ``callproc``."""

    def __init__(self, connection: FakeConnection) -> None:
        self.connection = connection
        self.description: Any = None
        self.rowcount = -1
        self.closed = False
        self._sets: list[tuple[list[str], list[tuple[Any, ...]]]] = []
        self._position = 0

    def _respond(self, command_text: str) -> dict[str, Any]:
        response = self.connection.responses.get(command_text, {})
        if "error" in response:
            raise response["error"]
        self._sets = list(response.get("sets", []))
        self._position = 0
        self.rowcount = response.get("rowcount", -1)
        self._describe()
        return response

    def _describe(self) -> None:
        if self._position < len(self._sets):
            columns = self._sets[self._position][0]
            self.description = [(name, None, None, None, None, None, None) for name in columns]
        else:
            self.description = None

    def execute(self, sql: str, parameters: Any = None) -> FakeCursor:
        self.connection.executed.append((sql, parameters))
        self._respond(sql)
        return self

    def fetchall(self) -> list[tuple[Any, ...]]:
        if self._position >= len(self._sets):
            return []
        return list(self._sets[self._position][1])

    def fetchone(self) -> tuple[Any, ...] | None:
        rows = self.fetchall()
        return rows[0] if rows else None

    def nextset(self) -> bool | None:
        self._position += 1
        self._describe()
        return True if self._position < len(self._sets) else None

    def close(self) -> None:
        self.closed = True


class FakeProcCursor(FakeCursor):
    """Cursor supporting ``callproc``."""

    def callproc(self, procname: str, parameters: list[Any]) -> list[Any]:
        self.connection.called.append((procname, list(parameters)))
        response = self._respond(procname)
        reported = list(parameters)
        for index, value in response.get("outputs", {}).items():
            reported[index] = value
        return reported


class FakeConnection:
    def __init__(self, responses: dict[str, dict[str, Any]] | None = None, cursor_class: type = FakeProcCursor) -> None:
        self.responses = responses or {}
        self.cursor_class = cursor_class
        self.executed: list[tuple[str, Any]] = []
        self.called: list[tuple[str, list[Any]]] = []
        self.cursors: list[FakeCursor] = []
        self.commits = 0
        self.rollbacks = 0
        self.closes = 0

    def cursor(self) -> FakeCursor:
        cursor = self.cursor_class(self)
        self.cursors.append(cursor)
        return cursor

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1

    def close(self) -> None:
        self.closes += 1


@pytest.fixture
def fake_connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def fake_database(fake_connection: FakeConnection) -> DbApiDatabase:
    """A named-paramstyle handle whose every connection is ``fake_connection``."""
    return DbApiDatabase("fake://db", connect=lambda _: fake_connection, paramstyle="named")
