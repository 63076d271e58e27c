"""Command construction and parameter binding."""

from typing import TYPE_CHECKING, Callable, Optional

from mypy_extensions import trait

from dbfunc.core.command import BoundCommand, CommandType
from dbfunc.core.parameters import DatabaseParameterCollection, ParameterDirection
from dbfunc.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from dbfunc.config import CommandServiceConfig
    from dbfunc.core.command import DbCommand
    from dbfunc.driver._database import DatabaseAdapterBase

__all__ = ("CommandBuilderMixin", "ParametersCallback", "qualify_procedure_name")

ParametersCallback = Callable[[DatabaseParameterCollection], None]


def qualify_procedure_name(procedure_name: str, schema_name: str) -> str:
    """Prefix ``procedure_name`` with ``schema_name`` unless it already has a schema."""
    if "." in procedure_name:
        return procedure_name
    return f"{schema_name}.{procedure_name}"


@trait
class CommandBuilderMixin:
    """Builds bound commands from command text and a population callback."""

    __slots__ = ()
    config: "CommandServiceConfig"

    def get_database(self) -> "DatabaseAdapterBase":
        raise NotImplementedError

    def set_up_parameters(self, parameters_func: "Optional[ParametersCallback]" = None) -> "Optional[DatabaseParameterCollection]":
        """Run the population callback against a fresh collection.

        Returns:
            The populated collection, or ``None`` when no callback was given.
        """
        if parameters_func is None:
            return None
        parameters = DatabaseParameterCollection(
            timeout=self.config.default_timeout, default_size=self.config.default_string_size
        )
        parameters_func(parameters)
        return parameters

    def set_up_command(
        self, text: str, command_type: CommandType, parameters_func: "Optional[ParametersCallback]" = None
    ) -> BoundCommand:
        """Build a command for ``text`` and bind the caller's parameters to it.

        Args:
            text: Stored procedure name or SQL text.
            command_type: How ``text`` is interpreted.
            parameters_func: Callback that fills the parameter collection.

        Raises:
            InvalidArgumentError: If ``text`` is empty or whitespace.

        Returns:
            The handle, the bound command and the collection (``None`` without a callback).
        """
        if not text or not text.strip():
            msg = "Command text must not be empty"
            raise InvalidArgumentError(msg, argument="text")

        if command_type is CommandType.STORED_PROCEDURE:
            text = qualify_procedure_name(text, self.config.schema_name)

        parameters = self.set_up_parameters(parameters_func)
        database = self.get_database()

        if command_type is CommandType.STORED_PROCEDURE:
            command = database.get_stored_proc_command(text)
        else:
            command = database.get_sql_string_command(text)

        if parameters is not None and parameters.timeout > 0:
            command.command_timeout = parameters.timeout

        if parameters is not None and parameters.count > 0:
            self._bind_parameters(database, command, parameters)

        return BoundCommand(database, command, parameters)

    @staticmethod
    def _bind_parameters(
        database: "DatabaseAdapterBase", command: "DbCommand", parameters: DatabaseParameterCollection
    ) -> None:
        for parameter in parameters:
            if parameter.direction is ParameterDirection.OUTPUT:
                database.add_out_parameter(command, parameter.name, parameter.db_type, parameter.size)
                continue

            if parameter.direction is ParameterDirection.INPUT_OUTPUT:
                database.add_parameter(
                    command, parameter.name, parameter.db_type, parameter.size, parameter.direction, parameter.value
                )
                continue

            database.add_in_parameter(command, parameter.name, parameter.db_type, parameter.value)
