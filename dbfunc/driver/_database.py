"""Database handle base class.

A handle is created once per connection string and shared across threads.
It hands out :class:`~dbfunc.core.command.DbCommand` objects, attaches
parameters to them, and runs them. Each execution acquires its own
connection, so a handle keeps no per-call state.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from dbfunc.core.command import CommandParameter, CommandType, DbCommand
from dbfunc.core.parameters import DbType, ParameterDirection
from dbfunc.exceptions import DatabaseConnectionError, DbFuncError
from dbfunc.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Generator

    from dbfunc.core.result import ResultSet

__all__ = ("DatabaseAdapterBase",)

logger = get_logger("driver")


class DatabaseAdapterBase(ABC):
    """Template for database handles.

    Subclasses supply ``create_connection``, ``handle_database_exceptions`` and
    the three ``_execute_*`` hooks. The public ``execute_*`` methods wrap those
    hooks with connection management and exception translation.
    """

    __slots__ = ("connection_string",)

    def __init__(self, connection_string: str) -> None:
        self.connection_string = connection_string

    # -- Command construction --

    def get_stored_proc_command(self, procedure_name: str) -> DbCommand:
        return DbCommand(procedure_name, CommandType.STORED_PROCEDURE)

    def get_sql_string_command(self, sql: str) -> DbCommand:
        return DbCommand(sql, CommandType.TEXT)

    def add_in_parameter(self, command: DbCommand, name: str, db_type: DbType, value: Any) -> CommandParameter:
        return command.add(CommandParameter(name, db_type, ParameterDirection.INPUT, value=value))

    def add_out_parameter(self, command: DbCommand, name: str, db_type: DbType, size: int) -> CommandParameter:
        return command.add(CommandParameter(name, db_type, ParameterDirection.OUTPUT, size=size))

    def add_parameter(
        self,
        command: DbCommand,
        name: str,
        db_type: DbType,
        size: int,
        direction: ParameterDirection,
        value: Any,
    ) -> CommandParameter:
        return command.add(CommandParameter(name, db_type, direction, size=size, value=value))

    # -- Connection management --

    @abstractmethod
    def create_connection(self) -> Any:
        """Open a new DB-API connection for ``connection_string``."""

    @contextmanager
    def provide_connection(self) -> "Generator[Any, None, None]":
        """Yield a connection, committing on success and rolling back on error.

        Raises:
            DatabaseConnectionError: If the connection cannot be opened.
        """
        try:
            connection = self.create_connection()
        except DbFuncError:
            raise
        except Exception as e:
            msg = f"Failed to connect to the database: {e}"
            raise DatabaseConnectionError(msg) from e

        try:
            yield connection
            connection.commit()
        except Exception:
            logger.debug("Rolling back after failed command")
            connection.rollback()
            raise
        finally:
            connection.close()

    @abstractmethod
    def handle_database_exceptions(self, command: DbCommand) -> "Any":
        """Return a context manager translating driver errors into ``ExecutionError``."""

    # -- Execution --

    def execute_non_query(self, command: DbCommand) -> int:
        """Run ``command`` and return the number of rows affected."""
        with self.handle_database_exceptions(command), self.provide_connection() as connection:
            return self._execute_non_query(connection, command)

    def execute_scalar(self, command: DbCommand) -> Any:
        """Run ``command`` and return the first column of the first row, or ``None``."""
        with self.handle_database_exceptions(command), self.provide_connection() as connection:
            return self._execute_scalar(connection, command)

    def execute_dataset(self, command: DbCommand) -> "ResultSet":
        """Run ``command`` and return every result table it produces."""
        with self.handle_database_exceptions(command), self.provide_connection() as connection:
            return self._execute_dataset(connection, command)

    @abstractmethod
    def _execute_non_query(self, connection: Any, command: DbCommand) -> int:
        """Execute and return the affected row count."""

    @abstractmethod
    def _execute_scalar(self, connection: Any, command: DbCommand) -> Any:
        """Execute and return a single value."""

    @abstractmethod
    def _execute_dataset(self, connection: Any, command: DbCommand) -> "ResultSet":
        """Execute and collect all result tables."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
