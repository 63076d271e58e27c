"""Generic handle for DB-API 2.0 compliant drivers.

Text commands run through ``cursor.execute``. Stored procedures run through
``cursor.callproc``, whose returned sequence carries the post-execution values
of output and input-output arguments in bind order.
"""

import contextlib
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable

from dbfunc.core.command import CommandType, DbCommand
from dbfunc.core.parameters import normalize_parameter_name
from dbfunc.core.result import ResultSet, ResultTable
from dbfunc.driver._database import DatabaseAdapterBase
from dbfunc.exceptions import DbFuncError, ExecutionError, ImproperConfigurationError

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ("DbApiDatabase",)

NAMED_PARAMSTYLES = frozenset({"named", "pyformat"})
POSITIONAL_PARAMSTYLES = frozenset({"qmark", "format", "numeric"})


class DbApiDatabase(DatabaseAdapterBase):
    """Database handle over any DB-API 2.0 ``connect`` callable.

    Args:
        connection_string: Passed unchanged to ``connect``.
        connect: Driver entry point, for example ``psycopg2.connect``.
        paramstyle: The driver's ``paramstyle``; decides whether text command
            parameters are sent as a mapping or a sequence.
    """

    __slots__ = ("_connect", "paramstyle")

    def __init__(
        self, connection_string: str, connect: "Callable[[str], Any]", paramstyle: str = "named"
    ) -> None:
        if paramstyle not in NAMED_PARAMSTYLES | POSITIONAL_PARAMSTYLES:
            msg = f"Unsupported DB-API paramstyle {paramstyle!r}"
            raise ImproperConfigurationError(msg)
        super().__init__(connection_string)
        self._connect = connect
        self.paramstyle = paramstyle

    def create_connection(self) -> Any:
        return self._connect(self.connection_string)

    def handle_database_exceptions(self, command: DbCommand) -> "Any":
        return self._handle_database_exceptions_impl(command)

    @contextmanager
    def _handle_database_exceptions_impl(self, command: DbCommand) -> "Generator[None, None, None]":
        try:
            yield
        except DbFuncError:
            raise
        except Exception as e:
            msg = f"Database error: {e}"
            raise ExecutionError(msg, command_text=command.command_text) from e

    # -- Hooks for subclasses --

    def prepare_cursor(self, connection: Any, cursor: Any, command: DbCommand) -> None:
        """Called before each execution. Drivers with per-statement timeouts apply them here."""

    def text_parameters(self, command: DbCommand) -> Any:
        """Return ``command``'s parameters shaped for ``cursor.execute``."""
        if self.paramstyle in NAMED_PARAMSTYLES:
            return {normalize_parameter_name(p.name): p.value for p in command.parameters}
        return [p.value for p in command.parameters]

    @contextmanager
    def with_cursor(self, connection: Any, command: DbCommand) -> "Generator[Any, None, None]":
        """Yield a cursor on which ``command`` has been executed."""
        cursor = connection.cursor()
        try:
            self.prepare_cursor(connection, cursor, command)
            self._run(cursor, command)
            yield cursor
        finally:
            with contextlib.suppress(Exception):
                cursor.close()

    def _run(self, cursor: Any, command: DbCommand) -> None:
        if command.command_type is CommandType.STORED_PROCEDURE:
            callproc = getattr(cursor, "callproc", None)
            if callproc is None:
                msg = f"{type(cursor).__name__} does not support stored procedures"
                raise ExecutionError(msg, command_text=command.command_text)
            reported = callproc(command.command_text, [p.value for p in command.parameters])
            if reported is not None:
                for parameter, value in zip(command.parameters, reported):
                    if parameter.direction.is_output:
                        parameter.value = value
            return

        cursor.execute(command.command_text, self.text_parameters(command))

    @staticmethod
    def _collect_tables(cursor: Any) -> "list[ResultTable]":
        tables: list[ResultTable] = []
        while True:
            if cursor.description:
                tables.append(ResultTable.from_cursor_rows(cursor.description, cursor.fetchall()))
            nextset = getattr(cursor, "nextset", None)
            if nextset is None or not nextset():
                return tables

    # -- Execution hooks --

    def _execute_non_query(self, connection: Any, command: DbCommand) -> int:
        with self.with_cursor(connection, command) as cursor:
            return cursor.rowcount

    def _execute_scalar(self, connection: Any, command: DbCommand) -> Any:
        with self.with_cursor(connection, command) as cursor:
            if not cursor.description:
                return None
            row = cursor.fetchone()
            return None if row is None else row[0]

    def _execute_dataset(self, connection: Any, command: DbCommand) -> ResultSet:
        with self.with_cursor(connection, command) as cursor:
            return ResultSet(self._collect_tables(cursor))
