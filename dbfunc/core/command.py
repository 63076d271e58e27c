"""Driver-level command objects.

A :class:`DbCommand` is what a database handle hands out for a piece of
command text; parameters are attached to it by the handle's ``add_*`` methods
and read back after execution.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple, Optional

from mypy_extensions import mypyc_attr

from dbfunc.core.parameters import DEFAULT_MAX_STRING_SIZE, DbType, ParameterDirection

if TYPE_CHECKING:
    from dbfunc.core.parameters import DatabaseParameterCollection
    from dbfunc.driver._database import DatabaseAdapterBase

__all__ = ("BoundCommand", "CommandParameter", "CommandType", "DbCommand")


class CommandType(str, Enum):
    """How command text is interpreted by the database."""

    STORED_PROCEDURE = "stored_procedure"
    TEXT = "text"

    def __str__(self) -> str:
        return self.value


@mypyc_attr(allow_interpreted_subclasses=True)
class CommandParameter:
    """A parameter as bound on a driver command."""

    __slots__ = ("db_type", "direction", "name", "size", "value")

    def __init__(
        self,
        name: str,
        db_type: DbType,
        direction: ParameterDirection = ParameterDirection.INPUT,
        size: int = DEFAULT_MAX_STRING_SIZE,
        value: Any = None,
    ) -> None:
        self.name = name
        self.db_type = db_type
        self.direction = direction
        self.size = size
        self.value = value

    def __repr__(self) -> str:
        return (
            f"CommandParameter(name={self.name!r}, db_type={self.db_type!s}, "
            f"direction={self.direction!s}, value={self.value!r})"
        )


@mypyc_attr(allow_interpreted_subclasses=True)
class DbCommand:
    """Command text, its kind, an optional timeout and the bound parameters."""

    __slots__ = ("command_text", "command_timeout", "command_type", "parameters")

    def __init__(self, command_text: str, command_type: CommandType) -> None:
        self.command_text = command_text
        self.command_type = command_type
        self.command_timeout: Optional[int] = None
        self.parameters: list[CommandParameter] = []

    def add(self, parameter: CommandParameter) -> CommandParameter:
        self.parameters.append(parameter)
        return parameter

    @property
    def output_parameters(self) -> "list[CommandParameter]":
        """Bound parameters whose values are reported back after execution."""
        return [parameter for parameter in self.parameters if parameter.direction.is_output]

    def __repr__(self) -> str:
        return (
            f"DbCommand(command_text={self.command_text!r}, command_type={self.command_type!s}, "
            f"command_timeout={self.command_timeout!r}, parameters={len(self.parameters)})"
        )


class BoundCommand(NamedTuple):
    """A command ready to run, with the handle and parameters used to build it.

    Attributes:
        database: The handle that created ``command``.
        command: The driver command with parameters attached.
        parameters: The caller's collection, or ``None`` when no population callback was given.
    """

    database: "DatabaseAdapterBase"
    command: DbCommand
    parameters: "Optional[DatabaseParameterCollection]"
