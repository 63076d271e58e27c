"""Command service: the typed entry points callers use.

Every entry point follows the same template: build a bound command, run it
through :meth:`~dbfunc.driver.CommandExecutorMixin.execute` with the matching
database call, and on failure log the command, its parameters and the
environment before re-raising the original exception.

Example::

    service = DatabaseCommandService("app.db")

    def parameters(p: DatabaseParameterCollection) -> None:
        p.add("CustomerID", DbType.INT32, 1)

    table = service.execute_sql_datatable("SELECT * FROM customer WHERE id = :CustomerID", parameters)
"""

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional, Union, overload

from typing_extensions import TypeVar

from dbfunc.adapters.sqlite import SqliteDatabase
from dbfunc.config import CommandServiceConfig
from dbfunc.core.cache import get_database_cache
from dbfunc.core.command import BoundCommand, CommandType
from dbfunc.driver._builder import CommandBuilderMixin
from dbfunc.driver._executor import CommandExecutorMixin
from dbfunc.exceptions import NoResultError
from dbfunc.utils.logging import command_context, get_logger
from dbfunc.utils.text import to_delimited_string

if TYPE_CHECKING:
    from collections.abc import Iterable

    from dbfunc.core.cache import DatabaseCache
    from dbfunc.core.result import ResultSet, ResultTable
    from dbfunc.driver._builder import ParametersCallback
    from dbfunc.driver._database import DatabaseAdapterBase

__all__ = ("DatabaseCommandService", "get_parameters_description")

R = TypeVar("R")
T = TypeVar("T")

DatabaseFactory = Callable[[str], "DatabaseAdapterBase"]

logger = get_logger("service")

SUMMARY_RULE = "-" * 80
STORED_PROCEDURE_LABEL = "the stored procedure"
SQL_LABEL = "the sql"


def get_parameters_description(bound: "Optional[BoundCommand]") -> str:
    """Summarize the parameters of ``bound`` for error messages.

    Returns:
        ``"None"`` when nothing was bound, otherwise the timeout followed by one
        numbered line per parameter.
    """
    if bound is None or bound.parameters is None:
        return "None"
    parameters = bound.parameters
    return f"Parameter Summary [Timeout:={parameters.timeout}]\n{SUMMARY_RULE}\n{parameters}"


class DatabaseCommandService(CommandBuilderMixin, CommandExecutorMixin):
    """Runs stored procedures and SQL text against one connection string.

    Args:
        connection_string: Identifies the database; also the handle cache key.
        config: Defaults for schema, sizes, timeouts and log labels.
        database_factory: Creates a handle for a connection string on first use.
            Defaults to :class:`~dbfunc.adapters.sqlite.SqliteDatabase`.
        database_cache: Handle cache; defaults to the process-wide cache.
    """

    __slots__ = ("_connection_string", "_database_cache", "_database_factory", "config")

    def __init__(
        self,
        connection_string: str,
        config: "Optional[CommandServiceConfig]" = None,
        *,
        database_factory: "Optional[DatabaseFactory]" = None,
        database_cache: "Optional[DatabaseCache[DatabaseAdapterBase]]" = None,
    ) -> None:
        self._connection_string = connection_string
        self.config = config.copy() if config is not None else CommandServiceConfig()
        self._database_factory: DatabaseFactory = database_factory or SqliteDatabase
        self._database_cache = database_cache if database_cache is not None else get_database_cache()

    # -- Properties --

    @property
    def logger(self) -> logging.Logger:
        return logger

    @property
    def environment_name(self) -> str:
        return self.config.environment_name

    @property
    def user_name(self) -> str:
        return self.config.user_name

    @property
    def schema_name(self) -> str:
        return self.config.schema_name

    @property
    def suppress_logging(self) -> bool:
        return self.config.suppress_logging

    @suppress_logging.setter
    def suppress_logging(self, value: bool) -> None:
        self.config.suppress_logging = value

    def get_connection_string(self) -> str:
        return self._connection_string

    def get_database(self) -> "DatabaseAdapterBase":
        """Return the shared handle for this service's connection string."""
        return self._database_cache.get_or_create(self.get_connection_string(), self.create_database)

    def create_database(self, connection_string: str) -> "DatabaseAdapterBase":
        return self._database_factory(connection_string)

    # -- Template --

    @overload
    def _execute_command(
        self,
        text: str,
        command_type: CommandType,
        parameters_func: "Optional[ParametersCallback]",
        operation: "Callable[[BoundCommand], R]",
        label: str,
    ) -> R: ...

    @overload
    def _execute_command(
        self,
        text: str,
        command_type: CommandType,
        parameters_func: "Optional[ParametersCallback]",
        operation: "Callable[[BoundCommand], R]",
        label: str,
        finalize: "Callable[[BoundCommand, R], T]",
    ) -> T: ...

    def _execute_command(
        self,
        text: str,
        command_type: CommandType,
        parameters_func: "Optional[ParametersCallback]",
        operation: "Callable[[BoundCommand], R]",
        label: str,
        finalize: "Optional[Callable[[BoundCommand, R], T]]" = None,
    ) -> "Union[R, T]":
        bound: Optional[BoundCommand] = None
        with command_context():
            try:
                bound = command = self.set_up_command(text, command_type, parameters_func)
                result = self.execute(command, lambda: operation(command))
                if finalize is not None:
                    return finalize(bound, result)
                return result
            except Exception as e:
                self.logger.exception(
                    "Failed to execute %s [%s, Parameters:=%s]. [Environment:=%s]  %s",
                    label,
                    text,
                    get_parameters_description(bound),
                    self.environment_name,
                    e,
                    extra={"extra_fields": {"command_text": text, "environment": self.environment_name}},
                )
                raise

    def _first_table(
        self, bound: BoundCommand, result_set: "Optional[ResultSet]", label: str, text: str, default_name: str = ""
    ) -> "ResultTable":
        table = result_set.first() if result_set is not None else None
        if table is None:
            msg = (
                f"Failed to execute {label} [{text}, Parameters:={get_parameters_description(bound)}].  "
                f"No table(s) returned. [Environment:={self.environment_name}]"
            )
            raise NoResultError(msg)
        if not table.name and default_name:
            table.name = default_name
        return table

    # -- Stored procedures --

    def execute_sp_non_query(
        self, stored_procedure_name: str, parameters_func: "Optional[ParametersCallback]" = None
    ) -> int:
        """Execute a stored procedure and return the number of rows affected."""
        return self._execute_command(
            stored_procedure_name,
            CommandType.STORED_PROCEDURE,
            parameters_func,
            lambda bound: bound.database.execute_non_query(bound.command),
            STORED_PROCEDURE_LABEL,
        )

    def execute_sp_scalar(
        self, stored_procedure_name: str, parameters_func: "Optional[ParametersCallback]" = None
    ) -> Any:
        """Execute a stored procedure and return its first value."""
        return self._execute_command(
            stored_procedure_name,
            CommandType.STORED_PROCEDURE,
            parameters_func,
            lambda bound: bound.database.execute_scalar(bound.command),
            STORED_PROCEDURE_LABEL,
        )

    def execute_sp_dataset(
        self, stored_procedure_name: str, parameters_func: "Optional[ParametersCallback]" = None
    ) -> "ResultSet":
        """Execute a stored procedure and return all of its result tables."""
        return self._execute_command(
            stored_procedure_name,
            CommandType.STORED_PROCEDURE,
            parameters_func,
            lambda bound: bound.database.execute_dataset(bound.command),
            STORED_PROCEDURE_LABEL,
        )

    def execute_sp_datatable(
        self, stored_procedure_name: str, parameters_func: "Optional[ParametersCallback]" = None
    ) -> "ResultTable":
        """Execute a stored procedure and return its first result table.

        An unnamed table is named after ``stored_procedure_name``.

        Raises:
            NoResultError: If the procedure returned no tables.
        """
        return self._execute_command(
            stored_procedure_name,
            CommandType.STORED_PROCEDURE,
            parameters_func,
            lambda bound: bound.database.execute_dataset(bound.command),
            STORED_PROCEDURE_LABEL,
            finalize=lambda bound, result_set: self._first_table(
                bound, result_set, STORED_PROCEDURE_LABEL, stored_procedure_name, default_name=stored_procedure_name
            ),
        )

    # -- SQL text --

    def execute_sql_non_query(self, sql: str, parameters_func: "Optional[ParametersCallback]" = None) -> int:
        """Execute SQL and return the number of rows affected."""
        return self._execute_command(
            sql,
            CommandType.TEXT,
            parameters_func,
            lambda bound: bound.database.execute_non_query(bound.command),
            "sql non-query",
        )

    def execute_sql_scalar(self, sql: str, parameters_func: "Optional[ParametersCallback]" = None) -> Any:
        """Execute SQL and return the first column of the first row."""
        return self._execute_command(
            sql,
            CommandType.TEXT,
            parameters_func,
            lambda bound: bound.database.execute_scalar(bound.command),
            "sql scalar",
        )

    def execute_sql_dataset(self, sql: str, parameters_func: "Optional[ParametersCallback]" = None) -> "ResultSet":
        """Execute SQL and return all result tables."""
        return self._execute_command(
            sql,
            CommandType.TEXT,
            parameters_func,
            lambda bound: bound.database.execute_dataset(bound.command),
            SQL_LABEL,
        )

    def execute_sql_datatable(self, sql: str, parameters_func: "Optional[ParametersCallback]" = None) -> "ResultTable":
        """Execute SQL and return the first result table.

        Raises:
            NoResultError: If the statement returned no tables.
        """
        return self._execute_command(
            sql,
            CommandType.TEXT,
            parameters_func,
            lambda bound: bound.database.execute_dataset(bound.command),
            SQL_LABEL,
            finalize=lambda bound, result_set: self._first_table(bound, result_set, SQL_LABEL, sql),
        )

    # -- Utility --

    def to_delimited_string(self, values: "Optional[Iterable[int]]", delimiter: str = ", ") -> str:
        """Join integer values with ``delimiter``; ``None`` or empty gives ``""``."""
        return to_delimited_string(values, delimiter)
