"""Named command parameters and the collection callers populate.

A :class:`DatabaseParameterCollection` is created once per command invocation
and handed to the caller's population callback. After execution, output,
input-output and return-value parameters receive the values reported by the
driver.
"""

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Any, Final, Optional

from mypy_extensions import mypyc_attr

from dbfunc.exceptions import DuplicateParameterError, InvalidArgumentError, ParameterNotFoundError

__all__ = (
    "DEFAULT_MAX_STRING_SIZE",
    "DEFAULT_TIMEOUT",
    "RETURN_VALUE",
    "DatabaseParameter",
    "DatabaseParameterCollection",
    "DbType",
    "ParameterDirection",
    "normalize_parameter_name",
)

DEFAULT_MAX_STRING_SIZE: Final = 8000
DEFAULT_TIMEOUT: Final = 30
RETURN_VALUE: Final = "RETURN_VALUE"
PARAMETER_SIGIL: Final = "@"


class DbType(str, Enum):
    """Driver-level type tags for command parameters."""

    ANSI_STRING = "ansi_string"
    BINARY = "binary"
    BOOLEAN = "boolean"
    BYTE = "byte"
    CURRENCY = "currency"
    DATE = "date"
    DATETIME = "datetime"
    DATETIME2 = "datetime2"
    DATETIME_OFFSET = "datetime_offset"
    DECIMAL = "decimal"
    DOUBLE = "double"
    GUID = "guid"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    OBJECT = "object"
    SINGLE = "single"
    STRING = "string"
    TIME = "time"
    XML = "xml"

    def __str__(self) -> str:
        return self.value


class ParameterDirection(str, Enum):
    """Whether a parameter carries data into a command, out of it, or both."""

    INPUT = "input"
    OUTPUT = "output"
    INPUT_OUTPUT = "input_output"
    RETURN_VALUE = "return_value"

    @property
    def is_output(self) -> bool:
        """True for directions whose value is written back after execution."""
        return self is not ParameterDirection.INPUT

    def __str__(self) -> str:
        return self.value


def normalize_parameter_name(name: str) -> str:
    """Strip a single leading ``@`` sigil from a parameter name."""
    if name.startswith(PARAMETER_SIGIL):
        return name[1:]
    return name


@mypyc_attr(allow_interpreted_subclasses=True)
class DatabaseParameter:
    """A named, typed, directional command argument.

    Only ``value`` may change after construction.
    """

    __slots__ = ("_direction", "_name", "_size", "_type", "value")

    def __init__(
        self,
        name: str,
        db_type: DbType,
        value: Any = None,
        direction: ParameterDirection = ParameterDirection.INPUT,
        size: int = DEFAULT_MAX_STRING_SIZE,
    ) -> None:
        if not name or not name.strip():
            msg = "Parameter name must not be empty"
            raise InvalidArgumentError(msg, argument="name")
        self._name = name
        self._type = db_type
        self._direction = direction
        self._size = size
        self.value = value

    @property
    def name(self) -> str:
        return self._name

    @property
    def db_type(self) -> DbType:
        return self._type

    @property
    def direction(self) -> ParameterDirection:
        return self._direction

    @property
    def size(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return (
            f"DatabaseParameter(name={self._name!r}, db_type={self._type!s}, "
            f"direction={self._direction!s}, size={self._size}, value={self.value!r})"
        )

    def __str__(self) -> str:
        value = "null" if self.value is None else str(self.value)
        return f"Name:={self._name}, Type:={self._type}, Value:={value}"


@mypyc_attr(allow_interpreted_subclasses=True)
class DatabaseParameterCollection:
    """Insertion-ordered, uniquely keyed parameters for one command invocation.

    Parameters are keyed by their name without a leading ``@`` and lookups
    strip it too, so ``"@X"`` and ``"X"`` address the same entry. A miss on
    ``RETURN_VALUE`` (any casing) synthesizes an integer output parameter
    stored under the name exactly as requested, so a synthesized
    ``"@RETURN_VALUE"`` and ``"RETURN_VALUE"`` end up as separate entries.
    """

    __slots__ = ("_default_size", "_parameters", "_timeout")

    def __init__(
        self,
        parameters: "Optional[Iterable[DatabaseParameter]]" = None,
        timeout: int = DEFAULT_TIMEOUT,
        default_size: int = DEFAULT_MAX_STRING_SIZE,
    ) -> None:
        self._parameters: dict[str, DatabaseParameter] = {}
        self._default_size = default_size
        self._timeout = DEFAULT_TIMEOUT
        self.timeout = timeout
        if parameters is not None:
            for parameter in parameters:
                self.add_parameter(parameter)

    @property
    def timeout(self) -> int:
        """Command timeout in seconds; zero keeps the command's own default."""
        return self._timeout

    @timeout.setter
    def timeout(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            msg = f"Timeout must be a non-negative integer, got {value!r}"
            raise InvalidArgumentError(msg, argument="timeout")
        self._timeout = value

    @property
    def count(self) -> int:
        return len(self._parameters)

    def add(
        self,
        name: str,
        db_type: DbType,
        value: Any = None,
        direction: ParameterDirection = ParameterDirection.INPUT,
        size: "Optional[int]" = None,
    ) -> DatabaseParameter:
        """Create a parameter and add it to the collection.

        ``size`` defaults to the collection's default string size.

        Raises:
            DuplicateParameterError: If ``name`` is already present.
        """
        parameter_size = self._default_size if size is None else size
        return self.add_parameter(DatabaseParameter(name, db_type, value, direction, parameter_size))

    def add_parameter(self, parameter: DatabaseParameter) -> DatabaseParameter:
        """Add an existing parameter instance.

        Raises:
            DuplicateParameterError: If a parameter with the same name, ignoring a
                leading ``@``, is present.
        """
        key = normalize_parameter_name(parameter.name)
        if key in self._parameters:
            msg = f"Failed to add parameter. A parameter with the same key [{parameter.name}] is already in this collection."
            raise DuplicateParameterError(msg, name=key)
        self._parameters[key] = parameter
        return parameter

    def get(self, name: str) -> DatabaseParameter:
        """Return the parameter for ``name``, tolerating a leading ``@``.

        Raises:
            ParameterNotFoundError: If no parameter matches and ``name`` is not ``RETURN_VALUE``.
        """
        parameter_name = normalize_parameter_name(name)
        parameter = self._parameters.get(parameter_name)
        if parameter is not None:
            return parameter

        if parameter_name.upper() == RETURN_VALUE:
            parameter = DatabaseParameter(parameter_name, DbType.INT32, None, ParameterDirection.OUTPUT)
            self._parameters[name] = parameter
            return parameter

        msg = f"Failed to get the parameter for the name [{parameter_name}]"
        raise ParameterNotFoundError(msg, name=parameter_name)

    def keys(self) -> "list[str]":
        return list(self._parameters)

    def __getitem__(self, name: str) -> DatabaseParameter:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return normalize_parameter_name(name) in self._parameters

    def __iter__(self) -> Iterator[DatabaseParameter]:
        return iter(self._parameters.values())

    def __len__(self) -> int:
        return len(self._parameters)

    def __repr__(self) -> str:
        return f"DatabaseParameterCollection(count={len(self._parameters)}, timeout={self._timeout})"

    def __str__(self) -> str:
        if not self._parameters:
            return "Count:=0"
        return "\n".join(f"{ordinal:04d}: {parameter}" for ordinal, parameter in enumerate(self, start=1))
