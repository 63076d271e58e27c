import datetime
import sqlite3
import time
from contextlib import contextmanager
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Final, Optional
from uuid import UUID, uuid4

from dbfunc._serialization import encode_json
from dbfunc.adapters.dbapi import DbApiDatabase
from dbfunc.core.parameters import normalize_parameter_name
from dbfunc.exceptions import DbFuncError, ExecutionError, QueryTimeoutError
from dbfunc.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Generator

    from dbfunc.core.command import DbCommand

__all__ = ("SqliteDatabase", "resolve_database", "sqlite_type_coercion_map")

logger = get_logger("adapters.sqlite")

# Virtual machine instructions between timeout checks.
PROGRESS_HANDLER_INTERVAL: Final = 1000

sqlite_type_coercion_map: "dict[type, Callable[[Any], Any]]" = {
    bool: int,
    datetime.datetime: lambda v: v.isoformat(),
    datetime.date: lambda v: v.isoformat(),
    datetime.time: lambda v: v.isoformat(),
    Decimal: str,
    UUID: str,
    dict: encode_json,
    list: encode_json,
    tuple: lambda v: encode_json(list(v)),
}


def _coerce(value: Any) -> Any:
    converter = sqlite_type_coercion_map.get(type(value))
    return value if converter is None else converter(value)


def resolve_database(connection_string: str) -> "tuple[str, bool]":
    """Return the path or URI to open and whether it names an in-memory database.

    In-memory databases are rewritten to a uniquely named shared-cache URI so
    that every connection opened by one handle sees the same data.
    """
    if connection_string in {"", ":memory:"} or connection_string.startswith("file::memory:"):
        return f"file:memory_{uuid4().hex}?mode=memory&cache=shared", True
    if connection_string.startswith("file:") and "mode=memory" in connection_string:
        if "cache=shared" not in connection_string:
            separator = "&" if "?" in connection_string else "?"
            connection_string = f"{connection_string}{separator}cache=shared"
        return connection_string, True
    return connection_string, False


class SqliteDatabase(DbApiDatabase):
    """Database handle for a SQLite file.

    The connection string is the database path, or a ``file:`` URI. SQLite has
    no stored procedures, so only text commands can run. Command timeouts are
    enforced with a progress handler that interrupts the statement once the
    deadline passes.

    An in-memory database lives only as long as a connection to it is open, so
    in-memory handles keep one anchor connection until :meth:`close`.
    """

    __slots__ = ("_anchor", "database")

    def __init__(self, connection_string: str) -> None:
        super().__init__(connection_string, connect=self._open, paramstyle="named")
        self.database, in_memory = resolve_database(connection_string)
        self._anchor: Optional[sqlite3.Connection] = None
        if in_memory:
            self._anchor = self._open(self.database)
            logger.debug("Opened in-memory SQLite database %s", self.database)

    @staticmethod
    def _open(database: str) -> sqlite3.Connection:
        connection = sqlite3.connect(database, uri=database.startswith("file:"), check_same_thread=False)
        connection.execute("PRAGMA foreign_keys = ON")
        return connection

    @property
    def in_memory(self) -> bool:
        return self._anchor is not None

    def create_connection(self) -> sqlite3.Connection:
        return self._connect(self.database)

    def close(self) -> None:
        """Release the anchor connection; an in-memory database is discarded."""
        if self._anchor is not None:
            self._anchor.close()
            self._anchor = None

    def text_parameters(self, command: "DbCommand") -> "dict[str, Any]":
        return {normalize_parameter_name(p.name): _coerce(p.value) for p in command.parameters}

    def prepare_cursor(self, connection: sqlite3.Connection, cursor: sqlite3.Cursor, command: "DbCommand") -> None:
        if not command.command_timeout:
            connection.set_progress_handler(None, PROGRESS_HANDLER_INTERVAL)
            return
        deadline = time.monotonic() + command.command_timeout
        connection.set_progress_handler(lambda: int(time.monotonic() > deadline), PROGRESS_HANDLER_INTERVAL)

    def handle_database_exceptions(self, command: "DbCommand") -> "Any":
        return self._handle_sqlite_exceptions(command)

    @contextmanager
    def _handle_sqlite_exceptions(self, command: "DbCommand") -> "Generator[None, None, None]":
        try:
            yield
        except DbFuncError:
            raise
        except sqlite3.OperationalError as e:
            if command.command_timeout and "interrupted" in str(e).lower():
                msg = f"SQLite command exceeded its {command.command_timeout} second timeout"
                raise QueryTimeoutError(msg, command_text=command.command_text) from e
            msg = f"SQLite database error: {e}"
            raise ExecutionError(msg, command_text=command.command_text) from e
        except sqlite3.Error as e:
            msg = f"SQLite database error: {e}"
            raise ExecutionError(msg, command_text=command.command_text) from e
